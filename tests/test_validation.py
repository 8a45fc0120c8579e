import math

import numpy as np
import pytest

from housing_maze.generators.maze import build_grid
from housing_maze.generators.maze.maze_types import MazeParams
from housing_maze.validation import (
    Severity, ValidationResult, ValidationStage, check_maze, validate_params,
)
from housing_maze.validation.core import InvalidParameterError

GOOD_2D = {"cellLength": 4, "wallWidth": 1, "wallHeight": 6, "gridWidth": 5, "gridHeight": 5}
GOOD_3D = dict(GOOD_2D, floors=3, floorLength=4, floorWidth=4, gridWidth=3, gridHeight=3)


def test_defaults_are_valid():
    assert validate_params(MazeParams.defaults(2), 2)
    assert validate_params(MazeParams.defaults(3), 3)


def test_good_params_pass():
    check = validate_params(GOOD_2D)
    assert check.valid
    assert check.error is None
    assert validate_params(GOOD_3D, 3).valid


def test_snake_case_names_accepted():
    check = validate_params({"cell_length": 4, "wall_width": 1, "wall_height": 6,
                             "grid_width": 3, "grid_height": 3})
    assert check.valid


def test_older_form_names_accepted():
    check = validate_params({"itemLength": 4, "itemWidth": 1, "itemHeight": 6,
                             "width": 3, "height": 3})
    assert check.valid


@pytest.mark.parametrize("key,value,message", [
    ("cellLength", 0, "Cell length must be between 0 and 20"),
    ("cellLength", 20.5, "Cell length must be between 0 and 20"),
    ("wallWidth", -1, "Wall width must be between 0 and 10"),
    ("wallHeight", 21, "Wall height must be between 0 and 20"),
    ("gridWidth", 1, "Grid width must be between 2 and 50"),
    ("gridHeight", 51, "Grid height must be between 2 and 50"),
    ("gridWidth", 2.5, "Grid width must be a whole number"),
    ("cellLength", "abc", "Cell length must be a number"),
    ("cellLength", float("nan"), "Cell length must be a number"),
    ("wallHeight", True, "Wall height must be a number"),
    ("gridWidth", None, "Grid width must be a number"),
])
def test_2d_rejections(key, value, message):
    check = validate_params(dict(GOOD_2D, **{key: value}))
    assert not check.valid
    assert check.error == message
    assert check.result.failed


def test_upper_bounds_inclusive():
    check = validate_params(dict(GOOD_2D, cellLength=20, wallWidth=10, wallHeight=20,
                                 gridWidth=50, gridHeight=2))
    assert check.valid


def test_whole_float_grid_size_accepted():
    assert validate_params(dict(GOOD_2D, gridWidth=4.0, gridHeight=4.0)).valid


def test_numpy_integer_grid_size_accepted():
    check = validate_params(dict(GOOD_2D, gridWidth=np.int64(6), gridHeight=np.int32(3)))
    assert check.valid, check.error


def test_numpy_fractional_grid_size_rejected():
    check = validate_params(dict(GOOD_2D, gridWidth=np.float64(4.5)))
    assert check.error == "Grid width must be a whole number"


@pytest.mark.parametrize("key,value,message", [
    ("floors", 1, "Floors must be between 2 and 10"),
    ("floors", 11, "Floors must be between 2 and 10"),
    ("gridWidth", 21, "Grid width must be between 2 and 20"),
    ("floorLength", 0, "Floor length must be between 0 and 20"),
    ("floorWidth", 25, "Floor width must be between 0 and 20"),
])
def test_3d_rejections(key, value, message):
    check = validate_params(dict(GOOD_3D, **{key: value}), 3)
    assert not check.valid
    assert check.error == message


def test_2d_ignores_floor_fields():
    assert validate_params(dict(GOOD_2D, floors=99, floorLength=-1)).valid


def test_first_error_reported_all_collected():
    check = validate_params(dict(GOOD_2D, cellLength=0, gridWidth=0))
    assert check.error.startswith("Cell length")
    assert len(check.result.errors) == 2


def test_non_mapping_rejected():
    assert not validate_params([1, 2, 3]).valid
    assert not validate_params("grid").valid


def test_unsupported_dimensions():
    check = validate_params(GOOD_2D, dimensions=4)
    assert not check.valid
    assert "dimensions" in check.error


def test_validation_has_no_side_effects():
    params = dict(GOOD_2D, cellLength=math.inf)
    before = dict(params)
    validate_params(params)
    assert params == before


def test_invalid_parameter_error_message():
    check = validate_params(dict(GOOD_2D, gridWidth=1))
    error = InvalidParameterError(check.result)
    assert error.message == "Grid width must be between 2 and 50"
    assert "PARAM-002" in str(error)


def test_result_report_and_dict():
    result = ValidationResult(stage=ValidationStage.GENERATION)
    assert result.report() == "Validation passed at generation stage"
    result.add(Severity.WARN, "MAZE-010", "bridge")
    result.add(Severity.FAIL, "MAZE-003", "bad", location="(0, 0, 0)")

    data = result.to_dict()
    assert data['passed'] is False
    assert data['counts'] == {"info": 0, "warn": 1, "fail": 1}
    assert data['stage'] == "generation"
    assert data['issues'][1]['severity'] == "FAIL"

    lines = result.report().splitlines()
    assert lines[0] == "Validation failed at generation stage with 2 issue(s)"
    assert lines[1] == "  [FAIL] MAZE-003 (0, 0, 0): bad"
    assert lines[2] == "  [WARN] MAZE-010: bridge"


def test_check_maze_flags_missing_links():
    grid = build_grid(2, 2)
    grid.link(0, 1)
    result = check_maze(grid, [])
    codes = {issue.code for issue in result.errors}
    assert codes == {"MAZE-003", "MAZE-004"}


def test_check_maze_flags_unmirrored_link():
    grid = build_grid(2, 1)
    grid.connections[0] = 2  # east, without the west half on cell 1
    result = check_maze(grid, [])
    assert "MAZE-001" in {issue.code for issue in result.errors}


def test_check_maze_warns_on_bridges():
    grid = build_grid(3, 1)
    grid.link(0, 1)
    grid.link(0, 2)
    result = check_maze(grid, [])
    assert result.passed
    assert [issue.code for issue in result.warnings] == ["MAZE-010"]
