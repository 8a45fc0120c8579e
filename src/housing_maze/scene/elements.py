"""
Rendering collaborator for maze elements.

Engines never talk to OpenGL directly. They build boxes and spheres through
a Scene, move them into place and attach them. The PreviewScene keeps the
attached elements in memory and turns them into vertex buffers for the
preview widget.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from housing_maze.generators.maze.maze_types import ElementKind

logger = logging.getLogger(__name__)


class Shape(Enum):
    BOX = "box"
    SPHERE = "sphere"
    EDGES = "edges"


class SceneElement:
    """
    A renderable primitive.

    `position` and `rotation_y` are mutable; `kind` may be written once.
    Children (the edge outline of a box) are positioned relative to their
    parent and follow it.
    """

    def __init__(self, shape: Shape, color: int,
                 dimensions: Sequence[float] = (1.0, 1.0, 1.0),
                 radius: float = 0.0, name: str = ""):
        self.shape = shape
        self.dimensions = tuple(float(d) for d in dimensions)
        self.radius = float(radius)
        self.name = name
        self.children: List['SceneElement'] = []
        self.parent: Optional['SceneElement'] = None
        self._position = np.zeros(3, dtype=np.float64)
        self._rotation_y = 0.0
        self._color = int(color)
        self._kind: Optional[ElementKind] = None
        self._listener: Optional[Callable[[], None]] = None

    @property
    def position(self) -> np.ndarray:
        return self._position

    @position.setter
    def position(self, value):
        self._position = np.asarray(value, dtype=np.float64).reshape(3)
        self._changed()

    @property
    def rotation_y(self) -> float:
        return self._rotation_y

    @rotation_y.setter
    def rotation_y(self, value: float):
        self._rotation_y = float(value)
        self._changed()

    @property
    def color(self) -> int:
        return self._color

    @color.setter
    def color(self, value: int):
        self._color = int(value)
        self._changed()

    @property
    def kind(self) -> Optional[ElementKind]:
        return self._kind

    @kind.setter
    def kind(self, value: ElementKind):
        if self._kind is not None and self._kind is not value:
            raise AttributeError(f"Element kind already set to {self._kind}")
        self._kind = value

    def add(self, child: 'SceneElement'):
        child.parent = self
        self.children.append(child)

    def world_position(self) -> np.ndarray:
        if self.parent is None:
            return self._position.copy()
        return self.parent.world_position() + self._position

    def world_rotation_y(self) -> float:
        if self.parent is None:
            return self._rotation_y
        return self.parent.world_rotation_y() + self._rotation_y

    def _changed(self):
        if self._listener is not None:
            self._listener()
        elif self.parent is not None:
            self.parent._changed()

    def __repr__(self) -> str:
        x, y, z = self._position
        return (f"SceneElement({self.shape.value}, kind={self._kind}, "
                f"pos=({x:.2f}, {y:.2f}, {z:.2f}), rot={self._rotation_y:.4f}, "
                f"color=#{self._color:06x})")


class Scene(ABC):
    """Minimal capability set the maze engines need from a renderer."""

    @abstractmethod
    def attach(self, element: SceneElement):
        """Add a renderable element."""

    @abstractmethod
    def detach(self, element: SceneElement):
        """Remove a renderable element. Unknown elements are ignored."""

    def create_box(self, dimensions: Sequence[float], color: int,
                   edge_color: Optional[int] = None) -> SceneElement:
        """Create a box, optionally with an outline of its edges as a child."""
        box = SceneElement(Shape.BOX, color, dimensions=dimensions)
        if edge_color is not None:
            box.add(SceneElement(Shape.EDGES, edge_color, dimensions=dimensions))
        return box

    def create_sphere(self, radius: float, color: int) -> SceneElement:
        return SceneElement(Shape.SPHERE, color, radius=radius)


class PreviewScene(Scene):
    """
    In-memory scene backing the OpenGL preview.

    `revision` increases on every change so the widget knows when its
    buffers are stale.
    """

    def __init__(self):
        self.objects: List[SceneElement] = []
        self.revision = 0

    def attach(self, element: SceneElement):
        if any(obj is element for obj in self.objects):
            return
        self.objects.append(element)
        element._listener = self._bump
        self._bump()

    def detach(self, element: SceneElement):
        for i, obj in enumerate(self.objects):
            if obj is element:
                del self.objects[i]
                element._listener = None
                self._bump()
                return

    def clear(self):
        for obj in self.objects:
            obj._listener = None
        self.objects.clear()
        self._bump()

    def get_object_by_name(self, name: str) -> Optional[SceneElement]:
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None

    def _bump(self):
        self.revision += 1

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, element: SceneElement) -> bool:
        return any(obj is element for obj in self.objects)

    def build_mesh(self):
        """Build solid render buffers for every attached element."""
        from .mesh_builder import build_scene_mesh
        return build_scene_mesh(self.objects)

    def build_wireframe(self):
        """Build line buffers for every attached edge outline."""
        from .mesh_builder import build_scene_wireframe
        return build_scene_wireframe(self.objects)
