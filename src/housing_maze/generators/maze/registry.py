"""
Element registry shared by the maze engines.

Owns the scene elements an engine has attached: it places segments and the
center marker, tears everything down on clear, and switches individual
elements between their normal and highlighted colors. Colors are looked up
by the element's kind tag.
"""

import logging
from typing import List, Optional

from housing_maze.generators.palette import PALETTE_SETTINGS, Palette
from housing_maze.scene import Scene, SceneElement

from .maze_types import MARKER_RADIUS, ElementKind, Segment

logger = logging.getLogger(__name__)


class ElementRegistry:
    """Tracks elements attached to a scene and their highlight state."""

    def __init__(self, scene: Scene, palette: Optional[Palette] = None):
        self.scene = scene
        self._fixed_palette = palette
        self.palette = palette if palette is not None else PALETTE_SETTINGS.get_palette()
        self.elements: List[SceneElement] = []

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def __getitem__(self, index: int):
        return self.elements[index]

    def place_segment(self, segment: Segment) -> SceneElement:
        """Create a box for a wall or floor segment and attach it."""
        element = self.scene.create_box(
            segment.dimensions,
            self.palette.color_for(segment.kind),
            edge_color=self.palette.edge_for(segment.kind),
        )
        element.position = segment.position
        element.rotation_y = segment.rotation_y
        element.kind = segment.kind
        self._attach(element)
        return element

    def place_marker(self, name: str) -> SceneElement:
        """Create the center marker sphere at the world origin."""
        element = self.scene.create_sphere(MARKER_RADIUS, self.palette.color_for(ElementKind.MARKER))
        element.position = (0.0, 0.0, 0.0)
        element.kind = ElementKind.MARKER
        element.name = name
        self._attach(element)
        return element

    def _attach(self, element: SceneElement):
        self.scene.attach(element)
        self.elements.append(element)

    def clear(self):
        """Detach every tracked element and its sub-objects.

        Engines built without an explicit palette reload the saved one here,
        so color changes apply from the next generation.
        """
        for element in self.elements:
            for child in element.children:
                self.scene.detach(child)
            self.scene.detach(element)
        if self.elements:
            logger.debug("Cleared %d elements", len(self.elements))
        self.elements = []
        if self._fixed_palette is None:
            self.palette = PALETTE_SETTINGS.get_palette()

    def _element_at(self, index: int) -> Optional[SceneElement]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self.elements):
            return self.elements[index]
        return None

    def highlight(self, index: int) -> bool:
        """Set the highlight color for the element at `index`.

        Returns:
            False when the index does not refer to an element
        """
        element = self._element_at(index)
        if element is None:
            return False
        element.color = self.palette.highlight_for(element.kind)
        return True

    def reset_color(self, index: int) -> bool:
        """Restore the base color for the element at `index`."""
        element = self._element_at(index)
        if element is None:
            return False
        element.color = self.palette.color_for(element.kind)
        return True

    def count(self, kind: ElementKind) -> int:
        return sum(1 for element in self.elements if element.kind is kind)

    @property
    def wall_count(self) -> int:
        return self.count(ElementKind.WALL)

    @property
    def floor_count(self) -> int:
        return self.count(ElementKind.FLOOR)

    @property
    def total_count(self) -> int:
        return len(self.elements)
