"""
Grid model for maze generation.

Cells live in flat numpy arrays addressed by ``(floor * H + y) * W + x``.
Connections are stored as a per-cell direction bitmask, so the connection
relation is symmetric by construction: ``link`` always sets both halves.
"""

import logging
from typing import Iterator, List, Optional, Set, Tuple

import numpy as np

from .maze_types import ALL_DIRECTIONS, HORIZONTAL_DIRECTIONS, Direction

logger = logging.getLogger(__name__)

Coords = Tuple[int, int, int]


class MazeGrid:
    """
    Rectangular (2D) or rectangular-prism (3D) lattice of maze cells.

    A 2D grid is a 3D grid with a single floor that only uses the four
    horizontal directions.
    """

    def __init__(self, width: int, height: int, floors: int = 1):
        if width <= 0 or height <= 0 or floors <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {width}x{height}x{floors}"
            )
        self.width = int(width)
        self.height = int(height)
        self.floors = int(floors)
        self.directions = ALL_DIRECTIONS if self.floors > 1 else HORIZONTAL_DIRECTIONS

        count = self.width * self.height * self.floors
        self.connections = np.zeros(count, dtype=np.uint8)
        self.visited = np.zeros(count, dtype=bool)
        self.neighbors: List[List[Tuple[Direction, int]]] = []
        # Repair links between cells that are not grid-adjacent
        self.bridges: Set[Tuple[int, int]] = set()

    @property
    def cell_count(self) -> int:
        return len(self.visited)

    @property
    def is_3d(self) -> bool:
        return self.floors > 1

    def index_of(self, x: int, y: int, floor: int = 0) -> int:
        return (floor * self.height + y) * self.width + x

    def coords_of(self, index: int) -> Coords:
        x = index % self.width
        y = (index // self.width) % self.height
        floor = index // (self.width * self.height)
        return x, y, floor

    def in_bounds(self, x: int, y: int, floor: int = 0) -> bool:
        return (0 <= x < self.width and 0 <= y < self.height
                and 0 <= floor < self.floors)

    def neighbor(self, index: int, direction: Direction) -> Optional[int]:
        """Index of the adjacent cell in `direction`, or None when out of bounds."""
        for d, other in self.neighbors[index]:
            if d is direction:
                return other
        return None

    def direction_between(self, a: int, b: int) -> Optional[Direction]:
        for d, other in self.neighbors[a]:
            if other == b:
                return d
        return None

    def link(self, a: int, b: int):
        """Connect two cells in both directions.

        Adjacent cells are linked through the direction bitmask; anything
        else is recorded as a bridge.
        """
        direction = self.direction_between(a, b)
        if direction is None:
            self.bridges.add((min(a, b), max(a, b)))
            return
        self.connections[a] |= direction.bit
        self.connections[b] |= direction.opposite.bit

    def has_connection(self, index: int, direction: Direction) -> bool:
        return bool(self.connections[index] & direction.bit)

    def is_linked(self, a: int, b: int) -> bool:
        direction = self.direction_between(a, b)
        if direction is None:
            return (min(a, b), max(a, b)) in self.bridges
        return self.has_connection(a, direction)

    def linked_cells(self, index: int) -> List[int]:
        """All cells linked to `index`, bridges included."""
        linked = [other for d, other in self.neighbors[index]
                  if self.connections[index] & d.bit]
        for a, b in self.bridges:
            if a == index:
                linked.append(b)
            elif b == index:
                linked.append(a)
        return linked

    def unvisited_neighbors(self, index: int) -> List[int]:
        return [other for _, other in self.neighbors[index] if not self.visited[other]]

    def edge_count(self) -> int:
        """Number of undirected links in the maze graph."""
        bits = np.unpackbits(self.connections[:, None], axis=1).sum()
        return int(bits) // 2 + len(self.bridges)

    def visited_count(self) -> int:
        return int(np.count_nonzero(self.visited))

    def iter_cells(self) -> Iterator[Tuple[int, Coords]]:
        """Yield (index, (x, y, floor)) by floor, then row, then column."""
        for index in range(self.cell_count):
            yield index, self.coords_of(index)

    def reachable_from(self, start: int = 0) -> Set[int]:
        """Cells reachable from `start` through links."""
        seen = {start}
        stack = [start]
        while stack:
            current = stack.pop()
            for other in self.linked_cells(current):
                if other not in seen:
                    seen.add(other)
                    stack.append(other)
        return seen

    def __repr__(self) -> str:
        return (f"MazeGrid({self.width}x{self.height}x{self.floors}, "
                f"edges={self.edge_count()}, visited={self.visited_count()})")


def build_grid(width: int, height: int, floors: int = 1) -> MazeGrid:
    """Build a grid and precompute each cell's in-bounds neighbors.

    Neighbors are listed in N, E, S, W, Up, Down order.
    """
    grid = MazeGrid(width, height, floors)
    for index, (x, y, floor) in grid.iter_cells():
        cell_neighbors = []
        for direction in grid.directions:
            nx = x + direction.dx
            ny = y + direction.dy
            nf = floor + direction.dfloor
            if grid.in_bounds(nx, ny, nf):
                cell_neighbors.append((direction, grid.index_of(nx, ny, nf)))
        grid.neighbors.append(cell_neighbors)

    logger.debug("Built %dx%dx%d grid with %d cells",
                 grid.width, grid.height, grid.floors, grid.cell_count)
    return grid
