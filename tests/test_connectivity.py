import random

from housing_maze.generators.maze import build_grid
from housing_maze.generators.maze.connectivity import (
    isolated_cells, manhattan, nearest_visited, repair,
)
from housing_maze.generators.maze.spanning_tree import SpanningTreeGenerator


def _partial_grid():
    """3x3x2 grid where only the bottom-left corner of floor 0 is carved."""
    grid = build_grid(3, 3, 2)
    a = grid.index_of(0, 0, 0)
    b = grid.index_of(1, 0, 0)
    grid.link(a, b)
    grid.visited[a] = True
    grid.visited[b] = True
    return grid


def test_manhattan():
    assert manhattan((0, 0, 0), (2, 1, 1)) == 4


def test_complete_walk_needs_no_repair():
    grid = build_grid(4, 4, 3)
    SpanningTreeGenerator(random.Random(5)).walk(grid, stop_when_complete=True)
    assert isolated_cells(grid) == []
    assert repair(grid) == 0


def test_nearest_visited_by_manhattan_distance():
    grid = _partial_grid()
    # (0, 1, 0) is one step from (0, 0, 0) and two from (1, 0, 0)
    assert nearest_visited(grid, grid.index_of(0, 1, 0)) == grid.index_of(0, 0, 0)
    # (1, 1, 0) is one step from (1, 0, 0) and two from (0, 0, 0)
    assert nearest_visited(grid, grid.index_of(1, 1, 0)) == grid.index_of(1, 0, 0)
    # (2, 1, 0) is two steps from (1, 0, 0); nothing closer
    assert nearest_visited(grid, grid.index_of(2, 1, 0)) == grid.index_of(1, 0, 0)


def test_nearest_visited_tie_goes_to_lowest_index():
    grid = build_grid(3, 1)
    grid.visited[grid.index_of(0, 0)] = True
    grid.visited[grid.index_of(2, 0)] = True
    assert nearest_visited(grid, grid.index_of(1, 0)) == grid.index_of(0, 0)


def test_nearest_visited_none_when_nothing_visited():
    grid = build_grid(2, 2)
    assert nearest_visited(grid, 0) is None


def test_repair_connects_every_cell():
    grid = _partial_grid()
    repaired = repair(grid)

    assert repaired == grid.cell_count - 2
    assert grid.visited.all()
    assert isolated_cells(grid) == []
    assert len(grid.reachable_from(0)) == grid.cell_count


def test_repair_links_adjacent_cells_through_bitmask():
    grid = _partial_grid()
    repair(grid)
    # (0, 1, 0) sits next to (0, 0, 0) so it is a regular link
    assert grid.is_linked(grid.index_of(0, 1, 0), grid.index_of(0, 0, 0))
    assert (0, grid.index_of(0, 1, 0)) not in grid.bridges


def test_repair_records_bridges_for_distant_cells():
    grid = build_grid(3, 3)
    far_corner = grid.index_of(2, 2)
    grid.visited[far_corner] = True

    assert repair(grid) == 8
    # The first cell repaired is four steps from the only visited cell
    assert (0, far_corner) in grid.bridges
    assert grid.is_linked(0, far_corner)
    assert len(grid.reachable_from(0)) == grid.cell_count


def test_repair_logs_warning(caplog):
    grid = _partial_grid()
    with caplog.at_level("WARNING"):
        repair(grid)
    assert "Connectivity repair linked" in caplog.text
