"""
Wall and floor emission.

Turns the connection graph of a MazeGrid into world-space segments:

- Internal walls on every cell boundary that has no passage
- Perimeter walls along every outer cell edge, regardless of connections
- Floor plates (multi-floor grids) between levels without a vertical passage

Walls come first, ordered by floor, row, column and direction, followed by
floor plates. Duplicate segments collapse onto the first one emitted; duplicates are found
by lattice slot rather than world position.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from .grid_model import MazeGrid
from .maze_types import (
    FLOOR_THICKNESS, HALF_PI, Direction, ElementKind, Segment,
    cell_center, floor_mid_height, maze_offsets,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


def dedupe(items: Iterable[T], key: Callable[[T], Tuple]) -> List[T]:
    """Keep the first item for each key, preserving order."""
    unique: Dict[Tuple, T] = {}
    for item in items:
        k = key(item)
        if k not in unique:
            unique[k] = item
    return list(unique.values())


class WallFloorEmitter:
    """Builds wall and floor segments for a carved grid."""

    def __init__(self, cell_length: float, wall_width: float, wall_height: float,
                 floor_length: Optional[float] = None,
                 floor_width: Optional[float] = None):
        self.cell_length = cell_length
        self.wall_width = wall_width
        self.wall_height = wall_height
        self.floor_length = floor_length if floor_length is not None else cell_length
        self.floor_width = floor_width if floor_width is not None else cell_length

    def emit(self, grid: MazeGrid) -> List[Segment]:
        offset_x, offset_z, _, _ = maze_offsets(grid.width, grid.height, self.cell_length)

        walls: List[Segment] = []
        for floor in range(grid.floors):
            walls.extend(self._internal_walls(grid, floor, offset_x, offset_z))
            walls.extend(self._perimeter_walls(grid, floor, offset_x, offset_z))

        floors: List[Segment] = []
        for floor in range(grid.floors - 1):
            floors.extend(self._floor_plates(grid, floor, offset_x, offset_z))

        segments = dedupe(walls + floors, key=lambda s: s.key)
        logger.debug("Emitted %d segments (%d candidates)",
                     len(segments), len(walls) + len(floors))
        return segments

    def _wall(self, x: float, y: float, z: float, rotation: float,
              slot: Tuple[int, int, int]) -> Segment:
        return Segment(
            kind=ElementKind.WALL,
            position=(x, y, z),
            rotation_y=rotation,
            dimensions=(self.wall_width, self.wall_height, self.cell_length),
            slot=slot,
        )

    def _internal_walls(self, grid: MazeGrid, floor: int,
                        offset_x: float, offset_z: float) -> List[Segment]:
        half = self.cell_length / 2
        wy = floor_mid_height(floor, self.wall_height)
        walls = []

        for y in range(grid.height):
            for x in range(grid.width):
                index = grid.index_of(x, y, floor)
                wx, wz = cell_center(x, y, self.cell_length, offset_x, offset_z)

                if y > 0 and not grid.has_connection(index, Direction.NORTH):
                    walls.append(self._wall(wx, wy, wz - half, HALF_PI, (floor, 2 * x + 1, 2 * y)))
                if x < grid.width - 1 and not grid.has_connection(index, Direction.EAST):
                    walls.append(self._wall(wx + half, wy, wz, 0.0, (floor, 2 * x + 2, 2 * y + 1)))
                if y < grid.height - 1 and not grid.has_connection(index, Direction.SOUTH):
                    walls.append(self._wall(wx, wy, wz + half, HALF_PI, (floor, 2 * x + 1, 2 * y + 2)))
                if x > 0 and not grid.has_connection(index, Direction.WEST):
                    walls.append(self._wall(wx - half, wy, wz, 0.0, (floor, 2 * x, 2 * y + 1)))
        return walls

    def _perimeter_walls(self, grid: MazeGrid, floor: int,
                         offset_x: float, offset_z: float) -> List[Segment]:
        half = self.cell_length / 2
        wy = floor_mid_height(floor, self.wall_height)
        maze_width = grid.width * self.cell_length
        maze_depth = grid.height * self.cell_length
        walls = []

        for x in range(grid.width):
            wx = offset_x + x * self.cell_length + half
            walls.append(self._wall(wx, wy, offset_z, HALF_PI, (floor, 2 * x + 1, 0)))
            walls.append(self._wall(wx, wy, offset_z + maze_depth, HALF_PI,
                                    (floor, 2 * x + 1, 2 * grid.height)))

        for y in range(grid.height):
            wz = offset_z + y * self.cell_length + half
            walls.append(self._wall(offset_x, wy, wz, 0.0, (floor, 0, 2 * y + 1)))
            walls.append(self._wall(offset_x + maze_width, wy, wz, 0.0,
                                    (floor, 2 * grid.width, 2 * y + 1)))
        return walls

    def _floor_plates(self, grid: MazeGrid, floor: int,
                      offset_x: float, offset_z: float) -> List[Segment]:
        # Plates sit on the plane between this level and the one above
        plate_y = (floor + 1) * self.wall_height
        plates = []

        for y in range(grid.height):
            for x in range(grid.width):
                index = grid.index_of(x, y, floor)
                if grid.has_connection(index, Direction.UP):
                    continue
                wx, wz = cell_center(x, y, self.cell_length, offset_x, offset_z)
                plates.append(Segment(
                    kind=ElementKind.FLOOR,
                    position=(wx, plate_y, wz),
                    rotation_y=0.0,
                    dimensions=(self.floor_length, FLOOR_THICKNESS, self.floor_width),
                    slot=(floor + 1, 2 * x + 1, 2 * y + 1),
                ))
        return plates
