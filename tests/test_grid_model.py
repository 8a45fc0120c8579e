import random

import pytest

from housing_maze.generators.maze import Direction, MazeGrid, build_grid
from housing_maze.generators.maze.spanning_tree import SpanningTreeGenerator


def test_rejects_non_positive_dimensions():
    with pytest.raises(ValueError):
        MazeGrid(0, 3)
    with pytest.raises(ValueError):
        MazeGrid(3, 3, floors=0)


def test_index_round_trip_covers_every_cell():
    grid = build_grid(4, 3, 2)
    seen = set()
    for index, (x, y, floor) in grid.iter_cells():
        assert grid.index_of(x, y, floor) == index
        seen.add((x, y, floor))
    assert len(seen) == 24


def test_corner_neighbors_2d():
    grid = build_grid(3, 3)
    corner = grid.index_of(0, 0)
    assert [d for d, _ in grid.neighbors[corner]] == [Direction.EAST, Direction.SOUTH]
    center = grid.index_of(1, 1)
    assert [d for d, _ in grid.neighbors[center]] == [
        Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST,
    ]


def test_vertical_neighbors_only_in_3d():
    flat = build_grid(2, 2)
    assert all(not d.is_vertical for cell in flat.neighbors for d, _ in cell)

    tower = build_grid(2, 2, 3)
    middle = tower.index_of(0, 0, 1)
    directions = [d for d, _ in tower.neighbors[middle]]
    assert directions[-2:] == [Direction.UP, Direction.DOWN]
    assert tower.neighbor(middle, Direction.UP) == tower.index_of(0, 0, 2)
    assert tower.neighbor(tower.index_of(0, 0, 2), Direction.UP) is None


def test_link_is_symmetric():
    grid = build_grid(2, 2, 2)
    a = grid.index_of(0, 0, 0)
    b = grid.index_of(0, 0, 1)
    grid.link(a, b)
    assert grid.has_connection(a, Direction.UP)
    assert grid.has_connection(b, Direction.DOWN)
    assert grid.is_linked(b, a)
    assert grid.edge_count() == 1
    assert grid.bridges == set()


def test_link_between_distant_cells_is_a_bridge():
    grid = build_grid(3, 3)
    a = grid.index_of(0, 0)
    b = grid.index_of(2, 2)
    grid.link(a, b)
    assert (a, b) in grid.bridges
    assert int(grid.connections[a]) == 0
    assert grid.is_linked(a, b)
    assert b in grid.linked_cells(a)
    assert grid.edge_count() == 1


def test_direction_opposites():
    for direction in Direction:
        assert direction.opposite.opposite is direction
        assert direction.opposite.dx == -direction.dx
        assert direction.opposite.dy == -direction.dy
        assert direction.opposite.dfloor == -direction.dfloor


@pytest.mark.parametrize("width,height,floors", [(2, 2, 1), (5, 5, 1), (50, 50, 1), (7, 3, 1),
                                                 (2, 2, 2), (3, 3, 4), (20, 20, 10)])
@pytest.mark.parametrize("seed", [0, 1, 99])
def test_walk_carves_spanning_tree(width, height, floors, seed):
    grid = build_grid(width, height, floors)
    visited = SpanningTreeGenerator(random.Random(seed)).walk(
        grid, stop_when_complete=floors > 1)

    assert visited == grid.cell_count
    assert grid.visited.all()
    assert grid.edge_count() == grid.cell_count - 1
    assert len(grid.reachable_from(0)) == grid.cell_count
    assert not grid.bridges


def test_walk_is_deterministic_for_a_seed():
    first = build_grid(6, 6)
    second = build_grid(6, 6)
    SpanningTreeGenerator(random.Random(7)).walk(first)
    SpanningTreeGenerator(random.Random(7)).walk(second)
    assert (first.connections == second.connections).all()


def test_walk_from_other_start():
    grid = build_grid(4, 4)
    SpanningTreeGenerator(random.Random(3)).walk(grid, start=grid.index_of(3, 3))
    assert grid.edge_count() == 15
    assert len(grid.reachable_from(0)) == 16
