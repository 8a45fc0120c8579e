"""
Housing Maze Toolkit

Procedural maze layouts (single-level and multi-floor) for import into a
housing design application.
"""

__version__ = '1.0.0'
