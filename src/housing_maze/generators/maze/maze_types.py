"""
Maze Types for Grid Maze Generation

This module defines the core data structures shared by the maze engines:
directions with their bitmask values, the closed set of element kinds,
emitted wall/floor segments and the generation parameters.

World space follows the housing tool's preview convention: X and Z span the
maze footprint, Y is up.
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from numbers import Integral, Real
from typing import Any, Dict, Mapping, Optional, Tuple

Vec3 = Tuple[float, float, float]


# =============================================================================
# GENERATION CONSTANTS
# =============================================================================

# Decimal places used when comparing positions/rotations for dedup
KEY_PRECISION = 4

# Floor plates are a fixed thickness; only length and width are configurable
FLOOR_THICKNESS = 1.0

# Center marker sphere
MARKER_RADIUS = 0.5

HALF_PI = math.pi / 2

# Parameter ranges (inclusive upper bounds, exclusive zero lower bounds)
MAX_CELL_LENGTH = 20.0
MAX_WALL_WIDTH = 10.0
MAX_WALL_HEIGHT = 20.0
MAX_FLOOR_LENGTH = 20.0
MAX_FLOOR_WIDTH = 20.0

MIN_GRID_SIZE = 2
MAX_GRID_SIZE_2D = 50
MAX_GRID_SIZE_3D = 20
MIN_FLOORS = 2
MAX_FLOORS = 10


class Direction(Enum):
    """Grid directions with their connection bit and (dx, dy, dfloor) offset.

    North is towards lower y, south towards higher y.
    """
    NORTH = (1, 0, -1, 0)
    EAST = (2, 1, 0, 0)
    SOUTH = (4, 0, 1, 0)
    WEST = (8, -1, 0, 0)
    UP = (16, 0, 0, 1)
    DOWN = (32, 0, 0, -1)

    def __init__(self, bit: int, dx: int, dy: int, dfloor: int):
        self.bit = bit
        self.dx = dx
        self.dy = dy
        self.dfloor = dfloor

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @property
    def is_vertical(self) -> bool:
        return self.dfloor != 0


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}

HORIZONTAL_DIRECTIONS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
ALL_DIRECTIONS = HORIZONTAL_DIRECTIONS + (Direction.UP, Direction.DOWN)


class ElementKind(Enum):
    """Kinds of elements a maze engine places in the scene."""
    WALL = "wall"
    FLOOR = "floor"
    MARKER = "marker"

    def __str__(self) -> str:
        return self.value


def element_key(kind: ElementKind, position: Vec3, rotation_y: float,
                precision: int = KEY_PRECISION) -> Tuple:
    """Build the dedup key for an element.

    Two elements with the same kind whose position and rotation agree to
    `precision` decimal places share a key.
    """
    # + 0.0 folds -0.0 into 0.0 so mirrored offsets compare equal
    return (
        kind,
        round(position[0], precision) + 0.0,
        round(position[1], precision) + 0.0,
        round(position[2], precision) + 0.0,
        round(rotation_y, precision) + 0.0,
    )


@dataclass(frozen=True)
class Segment:
    """
    A wall or floor plate emitted by the maze geometry pass.

    Walls are boxes of (width, height, length); floor plates are boxes of
    (length, thickness, width). Rotation is about the vertical axis.

    `slot` locates the segment on the half-cell lattice as (level, 2x, 2y).
    Segments with a slot dedupe on it, so the key does not depend on the
    cell size.
    """
    kind: ElementKind
    position: Vec3
    rotation_y: float
    dimensions: Vec3
    slot: Optional[Tuple[int, int, int]] = None

    @property
    def key(self) -> Tuple:
        if self.slot is not None:
            return (self.kind, self.slot, round(self.rotation_y, KEY_PRECISION) + 0.0)
        return element_key(self.kind, self.position, self.rotation_y)


# Parameter name aliases accepted from the UI layer (camelCase form names)
PARAM_ALIASES = {
    'cellLength': 'cell_length',
    'wallWidth': 'wall_width',
    'wallHeight': 'wall_height',
    'gridWidth': 'grid_width',
    'gridHeight': 'grid_height',
    'floorLength': 'floor_length',
    'floorWidth': 'floor_width',
    # Older form names
    'itemLength': 'cell_length',
    'itemWidth': 'wall_width',
    'itemHeight': 'wall_height',
    'width': 'grid_width',
    'height': 'grid_height',
}


@dataclass
class MazeParams:
    """
    Parameters for one maze generation run.

    Values are stored as given; `validate_params` decides whether they are
    acceptable. 2D engines ignore `floors`, `floor_length` and `floor_width`.
    """
    cell_length: Any = 4
    wall_width: Any = 1
    wall_height: Any = 6
    grid_width: Any = 5
    grid_height: Any = 5
    floors: Any = 1
    floor_length: Any = 4
    floor_width: Any = 4
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls, dimensions: int = 2) -> 'MazeParams':
        """Default parameters for a 2D or 3D maze."""
        if dimensions == 3:
            return cls(grid_width=3, grid_height=3, floors=2)
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], dimensions: int = 2) -> 'MazeParams':
        """Build parameters from a mapping of UI or snake_case names.

        Unknown keys are kept in `extra`. When only a grid width is given the
        grid is square.
        """
        params = cls.defaults(dimensions)
        known = {f.name for f in fields(cls)} - {'extra'}
        seen = set()

        for key, value in data.items():
            name = PARAM_ALIASES.get(key, key)
            if name in known:
                setattr(params, name, value)
                seen.add(name)
            else:
                params.extra[key] = value

        if 'grid_width' in seen and 'grid_height' not in seen:
            params.grid_height = params.grid_width
        if dimensions == 2:
            params.floors = 1
        return params

    @property
    def cell_count(self) -> int:
        return int(self.grid_width) * int(self.grid_height) * int(self.floors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cell_length': self.cell_length,
            'wall_width': self.wall_width,
            'wall_height': self.wall_height,
            'grid_width': self.grid_width,
            'grid_height': self.grid_height,
            'floors': self.floors,
            'floor_length': self.floor_length,
            'floor_width': self.floor_width,
        }


def coerce_params(params: Any, dimensions: int) -> MazeParams:
    """Accept a MazeParams instance or a mapping."""
    if isinstance(params, MazeParams):
        return params
    if params is None:
        return MazeParams.defaults(dimensions)
    return MazeParams.from_dict(params, dimensions)


def maze_offsets(grid_width: int, grid_height: int,
                 cell_length: float) -> Tuple[float, float, float, float]:
    """Return (offset_x, offset_z, maze_width, maze_depth) centering the maze."""
    maze_width = grid_width * cell_length
    maze_depth = grid_height * cell_length
    return -maze_width / 2, -maze_depth / 2, maze_width, maze_depth


def cell_center(x: int, y: int, cell_length: float,
                offset_x: float, offset_z: float) -> Tuple[float, float]:
    """World (x, z) of a cell's center."""
    return (
        x * cell_length + offset_x + cell_length / 2,
        y * cell_length + offset_z + cell_length / 2,
    )


def floor_mid_height(floor: int, wall_height: float) -> float:
    """World y of the middle of a floor level's walls."""
    return floor * wall_height + wall_height / 2


def optional_int(value: Any) -> Optional[int]:
    """Return value as int when it is integral, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real) and float(value).is_integer():
        return int(value)
    return None
