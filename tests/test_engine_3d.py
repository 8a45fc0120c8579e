import pytest

from housing_maze.generators.maze import Direction, ElementKind
from housing_maze.generators.maze.engine import generate_maze_3d
from housing_maze.generators.maze.spanning_tree import SpanningTreeGenerator
from housing_maze.validation import ConnectivityError, InvalidParameterError


def _vertical_links(grid, floor):
    return sum(
        1 for y in range(grid.height) for x in range(grid.width)
        if grid.has_connection(grid.index_of(x, y, floor), Direction.UP)
    )


@pytest.mark.parametrize("seed", range(10))
def test_two_by_two_by_two_plates_plus_links(make_engine, params_3d, seed):
    engine = make_engine(dimensions=3, seed=seed)
    engine.generate(params_3d)

    assert _vertical_links(engine.grid, 0) + engine.floor_count == 4
    assert engine.grid.edge_count() == 7
    assert engine.last_check.passed
    assert engine.repaired_cells == 0


def test_element_order(make_engine, params_3d):
    engine = make_engine(dimensions=3)
    elements = engine.generate(params_3d)
    kinds = [e.kind for e in elements]

    assert kinds[-1] is ElementKind.MARKER
    assert elements[-1].name == 'centerSphere3D'
    first_floor = kinds.index(ElementKind.FLOOR) if ElementKind.FLOOR in kinds else len(kinds) - 1
    assert all(k is ElementKind.WALL for k in kinds[:first_floor])
    assert all(k is not ElementKind.WALL for k in kinds[first_floor:])


def test_counts_add_up(make_engine, params_3d):
    engine = make_engine(dimensions=3, seed=8)
    engine.generate(dict(params_3d, gridWidth=4, gridHeight=3, floors=4))
    assert engine.total_count == engine.wall_count + engine.floor_count + 1
    for floor in range(3):
        plates = [
            e for e in engine.elements
            if e.kind is ElementKind.FLOOR and e.position[1] == pytest.approx((floor + 1) * 6)
        ]
        assert len(plates) + _vertical_links(engine.grid, floor) == 12


def test_walls_per_level(make_engine, params_3d):
    engine = make_engine(dimensions=3, seed=2)
    engine.generate(params_3d)
    levels = {round(float(e.position[1]), 4) for e in engine.elements if e.kind is ElementKind.WALL}
    assert levels == {3.0, 9.0}


def test_floor_plate_dimensions(make_engine, params_3d):
    engine = make_engine(dimensions=3, seed=4)
    engine.generate(dict(params_3d, gridWidth=5, gridHeight=5, floorLength=3, floorWidth=2))
    plates = [e for e in engine.elements if e.kind is ElementKind.FLOOR]
    assert plates
    assert all(p.dimensions == (3.0, 1.0, 2.0) for p in plates)


@pytest.mark.parametrize("floors", [1, 11, 2.5, "two"])
def test_floors_out_of_range_rejected(make_engine, params_3d, floors):
    engine = make_engine(dimensions=3)
    with pytest.raises(InvalidParameterError):
        engine.generate(dict(params_3d, floors=floors))


def test_grid_limit_is_tighter_in_3d(make_engine, params_3d):
    engine = make_engine(dimensions=3)
    with pytest.raises(InvalidParameterError) as excinfo:
        engine.generate(dict(params_3d, gridWidth=21))
    assert excinfo.value.message == "Grid width must be between 2 and 20"


def _lazy_walk(monkeypatch):
    """Make the walk carve only the first floor."""
    real_walk = SpanningTreeGenerator.walk

    def walk(self, grid, start=0, stop_when_complete=False):
        per_floor = grid.width * grid.height
        for index in range(per_floor, grid.cell_count):
            grid.visited[index] = True
        count = real_walk(self, grid, start, stop_when_complete)
        for index in range(per_floor, grid.cell_count):
            grid.visited[index] = False
        return count

    monkeypatch.setattr(SpanningTreeGenerator, "walk", walk)


def test_strict_mode_raises_on_isolated_cells(make_engine, params_3d, monkeypatch):
    _lazy_walk(monkeypatch)
    engine = make_engine(dimensions=3, strict=True)

    with pytest.raises(ConnectivityError) as excinfo:
        engine.generate(params_3d)
    codes = {issue.code for issue in excinfo.value.result.errors}
    assert codes == {"MAZE-006"}
    assert len(excinfo.value.result.errors) == 4
    assert engine.total_count == 0


def test_default_mode_repairs_isolated_cells(make_engine, params_3d, monkeypatch, caplog):
    _lazy_walk(monkeypatch)
    engine = make_engine(dimensions=3)

    with caplog.at_level("WARNING"):
        engine.generate(params_3d)

    assert engine.repaired_cells == 4
    assert engine.grid.visited.all()
    assert len(engine.grid.reachable_from(0)) == engine.grid.cell_count
    assert "Connectivity repair" in caplog.text
    assert engine.last_check.passed


def test_legacy_positional_call(make_engine):
    engine = make_engine(dimensions=3)
    generate_maze_3d(engine, 4, 4, 2)
    assert engine.grid.floors == 2
    assert _vertical_links(engine.grid, 0) + engine.floor_count == 4
