"""
Mesh builder for converting scene elements to renderable geometry.

Boxes and spheres become triangle buffers with position, normal, uv and
color per vertex; box edge outlines become line buffers. Scene space is
Y-up, the preview camera is Z-up, so every vertex is converted on the way
out: preview (x, y, z) = scene (x, -z, y).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .elements import SceneElement, Shape

Vec3 = Tuple[float, float, float]

# Sphere tessellation
SPHERE_SEGMENTS = 16
SPHERE_RINGS = 12

# Unit box faces as (normal, four corners in CCW order seen from outside)
_BOX_FACES = (
    ((1, 0, 0), ((1, -1, -1), (1, 1, -1), (1, 1, 1), (1, -1, 1))),
    ((-1, 0, 0), ((-1, -1, 1), (-1, 1, 1), (-1, 1, -1), (-1, -1, -1))),
    ((0, 1, 0), ((-1, 1, -1), (-1, 1, 1), (1, 1, 1), (1, 1, -1))),
    ((0, -1, 0), ((-1, -1, 1), (-1, -1, -1), (1, -1, -1), (1, -1, 1))),
    ((0, 0, 1), ((1, -1, 1), (1, 1, 1), (-1, 1, 1), (-1, -1, 1))),
    ((0, 0, -1), ((-1, -1, -1), (-1, 1, -1), (1, 1, -1), (1, -1, -1))),
)
_FACE_UVS = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))

# Unit box edges as pairs of corner indices into _BOX_CORNERS
_BOX_CORNERS = tuple(
    (sx, sy, sz) for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)
)
_BOX_EDGES = tuple(
    (i, j)
    for i in range(8) for j in range(i + 1, 8)
    if sum(a != b for a, b in zip(_BOX_CORNERS[i], _BOX_CORNERS[j])) == 1
)


@dataclass
class RenderMesh:
    """Renderable mesh data for OpenGL."""
    # Vertex data: position (3) + normal (3) + uv (2) + color (3) = 11 floats per vertex
    vertices: np.ndarray  # Shape: (N, 11), dtype=float32
    # Triangle indices
    indices: np.ndarray   # Shape: (M, 3), dtype=uint32
    # Bounding box
    bounds_min: Tuple[float, float, float]
    bounds_max: Tuple[float, float, float]

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0


def hex_to_rgb(color: int) -> Vec3:
    """0xRRGGBB to floats in [0, 1]."""
    return (
        ((color >> 16) & 0xFF) / 255.0,
        ((color >> 8) & 0xFF) / 255.0,
        (color & 0xFF) / 255.0,
    )


def rotate_y(v, angle: float) -> np.ndarray:
    """Rotate a scene-space vector about the vertical axis."""
    c = math.cos(angle)
    s = math.sin(angle)
    x, y, z = v
    return np.array([x * c + z * s, y, -x * s + z * c], dtype=np.float64)


def scene_to_preview(v) -> Vec3:
    """Convert a Y-up scene vector to the preview's Z-up axes."""
    return (float(v[0]), float(-v[2]), float(v[1]))


class MeshBuilder:
    """Converts scene elements to renderable mesh data."""

    def __init__(self):
        self._vertices: List[List[float]] = []
        self._indices: List[List[int]] = []
        self._bounds_min: Optional[List[float]] = None
        self._bounds_max: Optional[List[float]] = None

    def clear(self):
        """Clear all mesh data."""
        self._vertices.clear()
        self._indices.clear()
        self._bounds_min = None
        self._bounds_max = None

    def add_elements(self, elements: Iterable[SceneElement]):
        for element in elements:
            if element.shape is Shape.BOX:
                self._add_box(element)
            elif element.shape is Shape.SPHERE:
                self._add_sphere(element)

    def _add_vertex(self, position, normal, uv, color) -> int:
        p = scene_to_preview(position)
        n = scene_to_preview(normal)
        self._update_bounds(p)
        self._vertices.append([
            p[0], p[1], p[2],
            n[0], n[1], n[2],
            uv[0], uv[1],
            color[0], color[1], color[2],
        ])
        return len(self._vertices) - 1

    def _add_box(self, element: SceneElement):
        center = element.world_position()
        angle = element.world_rotation_y()
        half = np.array(element.dimensions, dtype=np.float64) / 2
        color = hex_to_rgb(element.color)

        for normal, corners in _BOX_FACES:
            world_normal = rotate_y(normal, angle)
            first_idx = len(self._vertices)
            for corner, uv in zip(corners, _FACE_UVS):
                local = np.array(corner, dtype=np.float64) * half
                self._add_vertex(center + rotate_y(local, angle), world_normal, uv, color)

            # Fan triangulation of the quad
            for i in range(1, 3):
                self._indices.append([first_idx, first_idx + i, first_idx + i + 1])

    def _add_sphere(self, element: SceneElement):
        center = element.world_position()
        radius = element.radius
        color = hex_to_rgb(element.color)
        first_idx = len(self._vertices)

        for ring in range(SPHERE_RINGS + 1):
            phi = math.pi * ring / SPHERE_RINGS
            for seg in range(SPHERE_SEGMENTS + 1):
                theta = 2 * math.pi * seg / SPHERE_SEGMENTS
                normal = np.array([
                    math.sin(phi) * math.cos(theta),
                    math.cos(phi),
                    math.sin(phi) * math.sin(theta),
                ])
                uv = (seg / SPHERE_SEGMENTS, ring / SPHERE_RINGS)
                self._add_vertex(center + normal * radius, normal, uv, color)

        row = SPHERE_SEGMENTS + 1
        for ring in range(SPHERE_RINGS):
            for seg in range(SPHERE_SEGMENTS):
                a = first_idx + ring * row + seg
                b = a + row
                self._indices.append([a, b, a + 1])
                self._indices.append([a + 1, b, b + 1])

    def _update_bounds(self, v: Vec3):
        """Update bounding box with new vertex."""
        if self._bounds_min is None:
            self._bounds_min = [v[0], v[1], v[2]]
            self._bounds_max = [v[0], v[1], v[2]]
        else:
            for axis in range(3):
                self._bounds_min[axis] = min(self._bounds_min[axis], v[axis])
                self._bounds_max[axis] = max(self._bounds_max[axis], v[axis])

    def build(self) -> RenderMesh:
        """Build the final renderable mesh."""
        if not self._vertices:
            return RenderMesh(
                vertices=np.zeros((0, 11), dtype=np.float32),
                indices=np.zeros((0, 3), dtype=np.uint32),
                bounds_min=(0.0, 0.0, 0.0),
                bounds_max=(0.0, 0.0, 0.0)
            )

        return RenderMesh(
            vertices=np.array(self._vertices, dtype=np.float32),
            indices=np.array(self._indices, dtype=np.uint32),
            bounds_min=tuple(self._bounds_min),
            bounds_max=tuple(self._bounds_max)
        )


def build_scene_mesh(elements: Iterable[SceneElement]) -> RenderMesh:
    """Convenience function to build a mesh from elements in one call."""
    builder = MeshBuilder()
    builder.add_elements(elements)
    return builder.build()


def _iter_edges(elements: Iterable[SceneElement]):
    for element in elements:
        if element.shape is Shape.EDGES:
            yield element
        yield from _iter_edges(element.children)


def build_scene_wireframe(elements: Iterable[SceneElement]) -> Tuple[np.ndarray, np.ndarray]:
    """Build line buffers for every edge outline in the element tree.

    Returns:
        Tuple of (vertices, indices) for line rendering.
        vertices: Shape (N, 6), dtype=float32 (position + color)
        indices: Shape (M, 2), dtype=uint32 (line segments)
    """
    vertices: List[List[float]] = []
    indices: List[List[int]] = []

    for outline in _iter_edges(elements):
        center = outline.world_position()
        angle = outline.world_rotation_y()
        half = np.array(outline.dimensions, dtype=np.float64) / 2
        color = hex_to_rgb(outline.color)

        first_idx = len(vertices)
        for corner in _BOX_CORNERS:
            p = scene_to_preview(center + rotate_y(np.array(corner) * half, angle))
            vertices.append([p[0], p[1], p[2], color[0], color[1], color[2]])
        for i, j in _BOX_EDGES:
            indices.append([first_idx + i, first_idx + j])

    if not vertices:
        return np.zeros((0, 6), dtype=np.float32), np.zeros((0, 2), dtype=np.uint32)

    return (
        np.array(vertices, dtype=np.float32),
        np.array(indices, dtype=np.uint32)
    )
