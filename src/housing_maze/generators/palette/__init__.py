"""
Palette module for element colors.
"""

from .palette_settings import (
    DEFAULT_COLORS,
    DEFAULT_EDGE_COLORS,
    PALETTE_SETTINGS,
    Palette,
    PaletteSettings,
    parse_color,
)

__all__ = [
    'Palette',
    'PaletteSettings',
    'PALETTE_SETTINGS',
    'DEFAULT_COLORS',
    'DEFAULT_EDGE_COLORS',
    'parse_color',
]
