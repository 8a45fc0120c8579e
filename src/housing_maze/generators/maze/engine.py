"""
Maze engine.

Orchestrates one generation run:

    validate -> clear -> build grid -> spanning walk -> [repair] -> emit
    -> add center marker -> dedup -> attach

Validation happens before anything is torn down, so rejected parameters
leave the previous maze in place. Every run rebuilds from scratch.
"""

import logging
import random
from enum import Enum, auto
from typing import Any, List, Optional

from housing_maze.generators.palette import Palette
from housing_maze.scene import PreviewScene, Scene, SceneElement
from housing_maze.validation import (
    ConnectivityError, InvalidParameterError, Severity, ValidationResult,
    ValidationStage, check_maze, validate_params,
)

from .connectivity import isolated_cells, repair
from .emitter import WallFloorEmitter, dedupe
from .grid_model import MazeGrid, build_grid
from .maze_types import MARKER_RADIUS, ElementKind, MazeParams, Segment, coerce_params
from .registry import ElementRegistry
from .spanning_tree import SpanningTreeGenerator

logger = logging.getLogger(__name__)


class EngineState(Enum):
    IDLE = auto()
    BUILDING = auto()
    CONNECTED = auto()
    EMITTED = auto()


MARKER_NAMES = {2: 'centerSphere', 3: 'centerSphere3D'}


class MazeEngine:
    """
    Generates 2D or multi-floor 3D mazes into a scene.

    Args:
        scene: Rendering collaborator; an in-memory PreviewScene by default
        dimensions: 2 or 3
        rng: Random source for the spanning walk
        seed: Seed for a private random source when no rng is given
        palette: Element colors; the saved palette by default
        strict: Raise ConnectivityError instead of repairing isolated cells
    """

    def __init__(self, scene: Optional[Scene] = None, dimensions: int = 2,
                 rng: Optional[random.Random] = None, seed: Optional[int] = None,
                 palette: Optional[Palette] = None, strict: bool = False):
        if dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {dimensions}")
        self.dimensions = dimensions
        self.scene = scene if scene is not None else PreviewScene()
        self.rng = rng if rng is not None else random.Random(seed)
        self.strict = strict
        self.registry = ElementRegistry(self.scene, palette)
        self.state = EngineState.IDLE

        self.params: Optional[MazeParams] = None
        self.grid: Optional[MazeGrid] = None
        self.segments: List[Segment] = []
        self.repaired_cells = 0
        self.last_check: Optional[ValidationResult] = None

    @property
    def is_3d(self) -> bool:
        return self.dimensions == 3

    @property
    def elements(self) -> List[SceneElement]:
        return list(self.registry.elements)

    def validate(self, params: Any):
        """Check parameters without touching engine state."""
        return validate_params(params, self.dimensions)

    def generate(self, params: Any) -> List[SceneElement]:
        """Build a new maze, replacing the current one.

        Args:
            params: MazeParams or a mapping of parameter names

        Returns:
            Attached elements: walls, then floor plates, then the center marker

        Raises:
            InvalidParameterError: Parameters rejected; the previous maze is untouched
            ConnectivityError: Strict mode and the walk left cells isolated
        """
        check = self.validate(params)
        if not check.valid:
            logger.warning("Rejected maze parameters: %s", check.error)
            raise InvalidParameterError(check.result)

        maze_params = coerce_params(params, self.dimensions)
        self.clear()

        self.state = EngineState.BUILDING
        floors = int(maze_params.floors) if self.is_3d else 1
        grid = build_grid(int(maze_params.grid_width), int(maze_params.grid_height), floors)
        SpanningTreeGenerator(self.rng).walk(grid, stop_when_complete=self.is_3d)

        self.state = EngineState.CONNECTED
        self.repaired_cells = self._ensure_connected(grid)

        if self.is_3d:
            emitter = WallFloorEmitter(
                maze_params.cell_length, maze_params.wall_width, maze_params.wall_height,
                maze_params.floor_length, maze_params.floor_width,
            )
        else:
            emitter = WallFloorEmitter(
                maze_params.cell_length, maze_params.wall_width, maze_params.wall_height,
            )
        segments = emitter.emit(grid)

        marker = Segment(
            kind=ElementKind.MARKER,
            position=(0.0, 0.0, 0.0),
            rotation_y=0.0,
            dimensions=(MARKER_RADIUS * 2,) * 3,
        )
        for segment in dedupe(segments + [marker], key=lambda s: s.key):
            if segment.kind is ElementKind.MARKER:
                self.registry.place_marker(MARKER_NAMES[self.dimensions])
            else:
                self.registry.place_segment(segment)
        self.state = EngineState.EMITTED

        self.params = maze_params
        self.grid = grid
        self.segments = segments
        self.last_check = check_maze(grid, segments)
        for issue in self.last_check.issues:
            if issue.severity is Severity.FAIL:
                logger.error("Maze check: %s", issue.format())
            elif issue.severity is Severity.WARN:
                logger.warning("Maze check: %s", issue.format())

        logger.info("Generated %dx%dx%d maze: %d walls, %d floors, %d elements",
                    grid.width, grid.height, grid.floors,
                    self.wall_count, self.floor_count, self.total_count)
        self.state = EngineState.IDLE
        return self.elements

    def _ensure_connected(self, grid: MazeGrid) -> int:
        if not self.is_3d:
            return 0
        isolated = isolated_cells(grid)
        if not isolated:
            return 0

        if self.strict:
            result = ValidationResult(stage=ValidationStage.GENERATION)
            for index in isolated:
                result.add(Severity.FAIL, "MAZE-006", "Cell not reached by the spanning walk",
                           location=str(grid.coords_of(index)))
            logger.error("Spanning walk left %d cell(s) isolated", len(isolated))
            self.state = EngineState.IDLE
            raise ConnectivityError(result)

        return repair(grid)

    def clear(self):
        """Detach every element and forget the current maze."""
        self.registry.clear()
        self.grid = None
        self.segments = []
        self.last_check = None
        self.repaired_cells = 0
        self.state = EngineState.IDLE

    def highlight_point(self, index: int) -> bool:
        return self.registry.highlight(index)

    def reset_point_color(self, index: int) -> bool:
        return self.registry.reset_color(index)

    @property
    def wall_count(self) -> int:
        return self.registry.wall_count

    @property
    def floor_count(self) -> int:
        return self.registry.floor_count

    @property
    def total_count(self) -> int:
        return self.registry.total_count


def create_engine(dimensions: int = 2, **kwargs) -> MazeEngine:
    return MazeEngine(dimensions=dimensions, **kwargs)


def generate_maze_2d(engine: MazeEngine, cell_length, wall_width, wall_height,
                     grid_width, grid_height=None) -> List[SceneElement]:
    """Positional call shape of the old single-level generator."""
    return engine.generate(MazeParams(
        cell_length=cell_length,
        wall_width=wall_width,
        wall_height=wall_height,
        grid_width=grid_width,
        grid_height=grid_width if grid_height is None else grid_height,
    ))


def generate_maze_3d(engine: MazeEngine, floor_length, floor_width,
                     grid_width, grid_height=None, floors=2, **rest) -> List[SceneElement]:
    """Positional call shape of the old multi-floor generator.

    The cell length follows the floor plate length unless given in `rest`;
    wall width and height fall back to 1 and 6.
    """
    return engine.generate(MazeParams(
        cell_length=rest.get('cell_length', floor_length),
        wall_width=rest.get('wall_width', 1),
        wall_height=rest.get('wall_height', 6),
        grid_width=grid_width,
        grid_height=grid_width if grid_height is None else grid_height,
        floors=floors,
        floor_length=floor_length,
        floor_width=floor_width,
    ))
