"""
Global element colors stored in QSettings.

Each element kind has a base color and a highlight color. Walls and floor
plates also carry an edge outline color.

Usage:
    from housing_maze.generators.palette import PALETTE_SETTINGS

    # Get colors for an element kind
    wall = PALETTE_SETTINGS.get_color(ElementKind.WALL)
    glow = PALETTE_SETTINGS.get_highlight(ElementKind.WALL)

    # Override a color
    PALETTE_SETTINGS.set_color("floor", 0x3366ff)

    # Reset to defaults
    PALETTE_SETTINGS.reset_to_defaults()
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from PyQt5.QtCore import QSettings

from housing_maze.generators.maze.maze_types import ElementKind


KIND_NAMES = [kind.value for kind in ElementKind]

# Default colors (0xRRGGBB): kind -> (base, highlight)
DEFAULT_COLORS = {
    "wall": (0xff0000, 0xdb63ff),
    "floor": (0x0066ff, 0x63dbff),
    "marker": (0x00ff00, 0xdb63ff),
}

# Edge outline colors; markers have none
DEFAULT_EDGE_COLORS = {
    "wall": 0x000000,
    "floor": 0x000044,
}

KindLike = Union[ElementKind, str]


def _kind_name(kind: KindLike) -> str:
    return kind.value if isinstance(kind, ElementKind) else str(kind)


def parse_color(value) -> Optional[int]:
    """Parse a stored color ('#rrggbb', '0xrrggbb' or an int) or return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 0xFFFFFF else None
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    if text.startswith('#'):
        text = text[1:]
    elif text.startswith('0x'):
        text = text[2:]
    if len(text) != 6:
        return None
    try:
        return int(text, 16)
    except ValueError:
        return None


def format_color(color: int) -> str:
    return f"#{color:06x}"


@dataclass(frozen=True)
class Palette:
    """Resolved colors for every element kind."""
    base: Dict[str, int]
    highlight: Dict[str, int]
    edges: Dict[str, int]

    def color_for(self, kind: KindLike) -> int:
        return self.base[_kind_name(kind)]

    def highlight_for(self, kind: KindLike) -> int:
        return self.highlight[_kind_name(kind)]

    def edge_for(self, kind: KindLike) -> Optional[int]:
        return self.edges.get(_kind_name(kind))

    @classmethod
    def defaults(cls) -> 'Palette':
        return cls(
            base={k: v[0] for k, v in DEFAULT_COLORS.items()},
            highlight={k: v[1] for k, v in DEFAULT_COLORS.items()},
            edges=dict(DEFAULT_EDGE_COLORS),
        )


class PaletteSettings:
    """Global element colors stored in QSettings.

    Unset or unparsable values fall back to the defaults.

    Note: QSettings is accessed lazily to avoid issues with object lifetime
    in test environments where QApplication may not persist.
    """

    def __init__(self, organization: str = "HousingMazeToolkit",
                 application: str = "Palette"):
        self._organization = organization
        self._application = application
        self._settings = None

    def _get_settings(self) -> QSettings:
        """Get or create the QSettings instance."""
        try:
            if self._settings is not None:
                # Raises if the underlying C++ object was deleted
                self._settings.organizationName()
                return self._settings
        except RuntimeError:
            pass

        self._settings = QSettings(self._organization, self._application)
        return self._settings

    def _read(self, key: str) -> Optional[int]:
        try:
            settings = self._get_settings()
            return parse_color(settings.value(key, ""))
        except RuntimeError:
            # QSettings not available, use defaults
            return None

    def _write(self, key: str, color: Optional[int]):
        try:
            settings = self._get_settings()
            if color is None:
                settings.remove(key)
            else:
                settings.setValue(key, format_color(color))
        except RuntimeError:
            pass

    def get_color(self, kind: KindLike) -> int:
        name = _kind_name(kind)
        stored = self._read(f"colors/{name}")
        return stored if stored is not None else DEFAULT_COLORS[name][0]

    def get_highlight(self, kind: KindLike) -> int:
        name = _kind_name(kind)
        stored = self._read(f"highlight/{name}")
        return stored if stored is not None else DEFAULT_COLORS[name][1]

    def get_edge_color(self, kind: KindLike) -> Optional[int]:
        name = _kind_name(kind)
        if name not in DEFAULT_EDGE_COLORS:
            return None
        stored = self._read(f"edges/{name}")
        return stored if stored is not None else DEFAULT_EDGE_COLORS[name]

    def set_color(self, kind: KindLike, color: Optional[int]):
        """Set a base color, or None to use the default."""
        name = _kind_name(kind)
        if name in DEFAULT_COLORS:
            self._write(f"colors/{name}", color)

    def set_highlight(self, kind: KindLike, color: Optional[int]):
        name = _kind_name(kind)
        if name in DEFAULT_COLORS:
            self._write(f"highlight/{name}", color)

    def set_edge_color(self, kind: KindLike, color: Optional[int]):
        name = _kind_name(kind)
        if name in DEFAULT_EDGE_COLORS:
            self._write(f"edges/{name}", color)

    def get_palette(self) -> Palette:
        """Snapshot of all current colors."""
        return Palette(
            base={name: self.get_color(name) for name in KIND_NAMES},
            highlight={name: self.get_highlight(name) for name in KIND_NAMES},
            edges={name: self.get_edge_color(name) for name in DEFAULT_EDGE_COLORS},
        )

    def reset_to_defaults(self):
        """Clear all custom colors, reverting to defaults."""
        try:
            settings = self._get_settings()
            for name in KIND_NAMES:
                settings.remove(f"colors/{name}")
                settings.remove(f"highlight/{name}")
                settings.remove(f"edges/{name}")
        except RuntimeError:
            pass


# Global singleton instance
PALETTE_SETTINGS = PaletteSettings()


__all__ = [
    'Palette',
    'PaletteSettings',
    'PALETTE_SETTINGS',
    'DEFAULT_COLORS',
    'DEFAULT_EDGE_COLORS',
    'parse_color',
]
