"""
Maze Generation Module

Grid mazes carved by a randomized depth-first walk and emitted as wall and
floor segments for the housing design preview.

Import the engine from `housing_maze.generators.maze.engine`.
"""

from .maze_types import (
    Direction,
    ElementKind,
    MazeParams,
    Segment,
    ALL_DIRECTIONS,
    HORIZONTAL_DIRECTIONS,
    KEY_PRECISION,
    MAX_FLOORS,
)
from .grid_model import MazeGrid, build_grid

__all__ = [
    'Direction',
    'ElementKind',
    'MazeParams',
    'Segment',
    'MazeGrid',
    'build_grid',
    'ALL_DIRECTIONS',
    'HORIZONTAL_DIRECTIONS',
    'KEY_PRECISION',
    'MAX_FLOORS',
]
