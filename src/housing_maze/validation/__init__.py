"""
Validation package for the Housing Maze Toolkit.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Stage enumeration
    - ValidationError: Exception carrying a failed result
    - InvalidParameterError, ConnectivityError: Engine failures
    - validate_params(): Pre-flight parameter check
    - check_maze(): Structural check of a generated maze
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
    InvalidParameterError,
    ConnectivityError,
)
from .params import ParameterCheck, validate_params
from .maze_checks import check_maze

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    'InvalidParameterError',
    'ConnectivityError',
    # Checks
    'ParameterCheck',
    'validate_params',
    'check_maze',
]
