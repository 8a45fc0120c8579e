"""
Structural checks for a generated maze.

Verifies the graph and geometry the engine just produced:
- every link joins grid neighbors and is recorded on both cells
- the link count matches a spanning tree
- every cell is reachable from the origin
- no two segments share a dedup key

Repair bridges are reported as warnings since they are expected when the
repair pass runs.
"""

from typing import Iterable, Set, Tuple

from housing_maze.generators.maze.grid_model import MazeGrid
from housing_maze.generators.maze.maze_types import Segment

from .core import Severity, ValidationResult, ValidationStage


def check_links(grid: MazeGrid, result: ValidationResult):
    for index in range(grid.cell_count):
        mask = int(grid.connections[index])
        allowed = 0
        for direction, other in grid.neighbors[index]:
            allowed |= direction.bit
            if mask & direction.bit and not grid.has_connection(other, direction.opposite):
                result.add(Severity.FAIL, "MAZE-001",
                           f"Link {direction.name} is not mirrored on the neighbor",
                           location=str(grid.coords_of(index)))
        if mask & ~allowed:
            result.add(Severity.FAIL, "MAZE-002",
                       "Cell links outside its neighbor list",
                       location=str(grid.coords_of(index)))


def check_tree(grid: MazeGrid, result: ValidationResult):
    expected = grid.cell_count - 1
    edges = grid.edge_count() - len(grid.bridges)
    if grid.bridges:
        result.add(Severity.WARN, "MAZE-010",
                   f"{len(grid.bridges)} repair bridge(s) added; maze may contain cycles",
                   remediation="Check the spanning walk for unreachable cells")
    elif edges != expected:
        result.add(Severity.FAIL, "MAZE-003",
                   f"Maze has {edges} links, expected {expected}")

    reachable = grid.reachable_from(0)
    if len(reachable) != grid.cell_count:
        result.add(Severity.FAIL, "MAZE-004",
                   f"{grid.cell_count - len(reachable)} cell(s) unreachable from the origin")


def check_segments(segments: Iterable[Segment], result: ValidationResult):
    seen: Set[Tuple] = set()
    for segment in segments:
        key = segment.key
        if key in seen:
            result.add(Severity.FAIL, "MAZE-005",
                       f"Duplicate {segment.kind} segment",
                       location=str(segment.position))
        seen.add(key)


def check_maze(grid: MazeGrid, segments: Iterable[Segment]) -> ValidationResult:
    """Run every structural check on a generated maze."""
    result = ValidationResult(stage=ValidationStage.GENERATION)
    check_links(grid, result)
    check_tree(grid, result)
    check_segments(segments, result)
    return result
