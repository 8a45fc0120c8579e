import os
import random
import sys

import pytest

# Ensure the src layout is importable without an install
SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from housing_maze.generators.maze.engine import MazeEngine  # noqa: E402
from housing_maze.generators.palette import Palette  # noqa: E402
from housing_maze.scene import PreviewScene  # noqa: E402


@pytest.fixture()
def scene():
    return PreviewScene()


@pytest.fixture()
def palette():
    return Palette.defaults()


@pytest.fixture()
def make_engine(scene, palette):
    """Engine factory bound to the shared scene with a seeded walk."""

    def _make(dimensions=2, seed=1234, **kwargs):
        return MazeEngine(scene, dimensions=dimensions, rng=random.Random(seed),
                          palette=palette, **kwargs)

    return _make


@pytest.fixture()
def params_2d():
    return {"cellLength": 4, "wallWidth": 1, "wallHeight": 6, "gridWidth": 2, "gridHeight": 2}


@pytest.fixture()
def params_3d():
    return {
        "cellLength": 4, "wallWidth": 1, "wallHeight": 6,
        "gridWidth": 2, "gridHeight": 2, "floors": 2,
        "floorLength": 4, "floorWidth": 4,
    }
