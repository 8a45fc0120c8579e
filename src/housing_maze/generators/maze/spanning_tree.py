"""
Randomized depth-first backtracking walk.

Carves a spanning tree over a MazeGrid using an explicit stack, so large
grids never hit the recursion limit.
"""

import logging
import random
from typing import Optional

from .grid_model import MazeGrid

logger = logging.getLogger(__name__)


class SpanningTreeGenerator:
    """Carves passages through a grid with a seedable random source."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def walk(self, grid: MazeGrid, start: int = 0, stop_when_complete: bool = False):
        """Mark every reachable cell visited and link it into the tree.

        Args:
            grid: Grid to mutate in place
            start: Index of the origin cell
            stop_when_complete: Stop as soon as every cell is visited instead
                of unwinding the whole stack
        """
        total = grid.cell_count
        grid.visited[start] = True
        visited_count = 1
        stack = [start]
        current = start

        while stack:
            if stop_when_complete and visited_count >= total:
                break

            candidates = grid.unvisited_neighbors(current)
            if candidates:
                nxt = self.rng.choice(candidates)
                grid.link(current, nxt)
                grid.visited[nxt] = True
                visited_count += 1
                stack.append(nxt)
                current = nxt
            else:
                current = stack.pop()

        logger.debug("Spanning walk visited %d/%d cells", visited_count, total)
        return visited_count
