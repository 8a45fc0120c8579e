"""
Connectivity repair for multi-floor mazes.

After the spanning walk every cell of a rectangular grid is visited, so this
pass normally finds nothing to do. If it ever does, each isolated cell is
linked to its nearest visited cell, which may add a cycle to the maze.
"""

import logging
from typing import List, Optional

from .grid_model import MazeGrid

logger = logging.getLogger(__name__)


def manhattan(a, b) -> int:
    return sum(abs(p - q) for p, q in zip(a, b))


def isolated_cells(grid: MazeGrid) -> List[int]:
    return [index for index in range(grid.cell_count) if not grid.visited[index]]


def nearest_visited(grid: MazeGrid, index: int) -> Optional[int]:
    """Nearest visited cell by Manhattan distance; ties go to the lowest index."""
    origin = grid.coords_of(index)
    best = None
    best_distance = None
    for other in range(grid.cell_count):
        if other == index or not grid.visited[other]:
            continue
        distance = manhattan(origin, grid.coords_of(other))
        if best_distance is None or distance < best_distance:
            best = other
            best_distance = distance
    return best


def repair(grid: MazeGrid) -> int:
    """Link every unvisited cell to the maze.

    Returns:
        Number of cells that had to be linked
    """
    repaired = 0
    for index in range(grid.cell_count):
        if grid.visited[index]:
            continue
        target = nearest_visited(grid, index)
        if target is None:
            continue
        grid.link(index, target)
        grid.visited[index] = True
        repaired += 1
        logger.warning("Repair linked isolated cell %s to %s",
                       grid.coords_of(index), grid.coords_of(target))

    if repaired:
        logger.warning("Connectivity repair linked %d cell(s); maze may contain cycles",
                       repaired)
    return repaired
