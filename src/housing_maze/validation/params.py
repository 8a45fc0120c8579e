"""
Pre-flight validation of maze generation parameters.

Runs before an engine touches any state. Every rule produces a FAIL issue
with the message shown to the user; the first failure is reported as the
check's `error`.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, List, Optional, Tuple

from housing_maze.generators.maze.maze_types import (
    MAX_CELL_LENGTH, MAX_FLOOR_LENGTH, MAX_FLOOR_WIDTH, MAX_FLOORS,
    MAX_GRID_SIZE_2D, MAX_GRID_SIZE_3D, MAX_WALL_HEIGHT, MAX_WALL_WIDTH,
    MIN_FLOORS, MIN_GRID_SIZE, MazeParams, coerce_params, optional_int,
)

from .core import Severity, ValidationResult, ValidationStage

# (attribute, label, upper bound) for lengths in the half-open range (0, max]
_LENGTH_RULES_2D: List[Tuple[str, str, float]] = [
    ('cell_length', 'Cell length', MAX_CELL_LENGTH),
    ('wall_width', 'Wall width', MAX_WALL_WIDTH),
    ('wall_height', 'Wall height', MAX_WALL_HEIGHT),
]
_LENGTH_RULES_3D = _LENGTH_RULES_2D + [
    ('floor_length', 'Floor length', MAX_FLOOR_LENGTH),
    ('floor_width', 'Floor width', MAX_FLOOR_WIDTH),
]


@dataclass
class ParameterCheck:
    """Outcome of a parameter check: `valid` plus the first error message."""
    valid: bool
    error: Optional[str] = None
    result: ValidationResult = field(default_factory=ValidationResult)

    def __bool__(self) -> bool:
        return self.valid


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def _check_length(result: ValidationResult, params: MazeParams,
                  attr: str, label: str, upper: float):
    value = getattr(params, attr)
    if not _is_number(value):
        result.add(Severity.FAIL, "PARAM-001", f"{label} must be a number",
                   remediation="Enter a numeric value", location=attr)
    elif value <= 0 or value > upper:
        result.add(Severity.FAIL, "PARAM-002",
                   f"{label} must be between 0 and {upper:g}",
                   remediation=f"Use a value in (0, {upper:g}]", location=attr)


def _check_count(result: ValidationResult, params: MazeParams,
                 attr: str, label: str, lower: int, upper: int):
    value = getattr(params, attr)
    if not _is_number(value):
        result.add(Severity.FAIL, "PARAM-001", f"{label} must be a number",
                   remediation="Enter a whole number", location=attr)
    elif optional_int(value) is None:
        result.add(Severity.FAIL, "PARAM-003", f"{label} must be a whole number",
                   remediation="Enter a whole number", location=attr)
    elif value < lower or value > upper:
        result.add(Severity.FAIL, "PARAM-002",
                   f"{label} must be between {lower} and {upper}",
                   remediation=f"Use a value in [{lower}, {upper}]", location=attr)


def validate_params(params: Any, dimensions: int = 2) -> ParameterCheck:
    """Check generation parameters without side effects.

    Args:
        params: MazeParams or a mapping of UI/snake_case names
        dimensions: 2 for a single-level maze, 3 for a multi-floor maze

    Returns:
        ParameterCheck with valid=False and the first error message on failure
    """
    result = ValidationResult(stage=ValidationStage.PARAMETERS)

    if dimensions not in (2, 3):
        result.add(Severity.FAIL, "PARAM-000", f"Unsupported maze dimensions: {dimensions}")
        return ParameterCheck(False, result.errors[0].message, result)

    try:
        maze_params = coerce_params(params, dimensions)
    except (TypeError, AttributeError):
        result.add(Severity.FAIL, "PARAM-000", "Parameters must be a mapping")
        return ParameterCheck(False, result.errors[0].message, result)

    length_rules = _LENGTH_RULES_3D if dimensions == 3 else _LENGTH_RULES_2D
    for attr, label, upper in length_rules:
        _check_length(result, maze_params, attr, label, upper)

    grid_max = MAX_GRID_SIZE_3D if dimensions == 3 else MAX_GRID_SIZE_2D
    _check_count(result, maze_params, 'grid_width', 'Grid width', MIN_GRID_SIZE, grid_max)
    _check_count(result, maze_params, 'grid_height', 'Grid height', MIN_GRID_SIZE, grid_max)

    if dimensions == 3:
        _check_count(result, maze_params, 'floors', 'Floors', MIN_FLOORS, MAX_FLOORS)

    if result.failed:
        return ParameterCheck(False, result.errors[0].message, result)
    return ParameterCheck(True, None, result)
