import math

import numpy as np
import pytest

from housing_maze.scene import MeshBuilder, PreviewScene, build_scene_mesh, build_scene_wireframe
from housing_maze.scene.mesh_builder import (
    SPHERE_RINGS, SPHERE_SEGMENTS, hex_to_rgb, rotate_y, scene_to_preview,
)


def test_empty_scene():
    mesh = build_scene_mesh([])
    assert mesh.is_empty
    assert mesh.vertices.shape == (0, 11)
    assert mesh.indices.shape == (0, 3)
    vertices, indices = build_scene_wireframe([])
    assert vertices.shape == (0, 6)
    assert indices.shape == (0, 2)


def test_box_geometry(scene):
    box = scene.create_box((2.0, 4.0, 6.0), 0xff0000)
    box.position = (1.0, 2.0, 3.0)
    mesh = build_scene_mesh([box])

    assert mesh.vertex_count == 24
    assert mesh.triangle_count == 12
    assert mesh.vertices.shape[1] == 11
    # scene (x, y, z) -> preview (x, -z, y)
    assert mesh.bounds_min == pytest.approx((0.0, -6.0, 0.0))
    assert mesh.bounds_max == pytest.approx((2.0, 0.0, 4.0))
    assert tuple(mesh.vertices[0, 8:11]) == pytest.approx((1.0, 0.0, 0.0))


def test_rotated_box_swaps_footprint(scene):
    box = scene.create_box((1.0, 1.0, 4.0), 0xffffff)
    box.rotation_y = math.pi / 2
    mesh = build_scene_mesh([box])
    extent = np.array(mesh.bounds_max) - np.array(mesh.bounds_min)
    assert tuple(extent) == pytest.approx((4.0, 1.0, 1.0))


def test_sphere_geometry(scene):
    sphere = scene.create_sphere(0.5, 0x00ff00)
    mesh = build_scene_mesh([sphere])
    assert mesh.vertex_count == (SPHERE_RINGS + 1) * (SPHERE_SEGMENTS + 1)
    assert mesh.triangle_count == SPHERE_RINGS * SPHERE_SEGMENTS * 2
    assert mesh.bounds_max == pytest.approx((0.5, 0.5, 0.5))


def test_edges_only_in_wireframe(scene):
    box = scene.create_box((1.0, 1.0, 1.0), 0xff0000, edge_color=0x000044)
    box.position = (5.0, 0.0, 0.0)

    mesh = build_scene_mesh([box])
    assert mesh.vertex_count == 24

    vertices, indices = build_scene_wireframe([box])
    assert vertices.shape == (8, 6)
    assert indices.shape == (12, 2)
    assert vertices[:, 0].min() == pytest.approx(4.5)
    assert tuple(vertices[0, 3:6]) == pytest.approx(hex_to_rgb(0x000044))


def test_builder_accumulates_and_clears(scene):
    builder = MeshBuilder()
    builder.add_elements([scene.create_box((1, 1, 1), 0), scene.create_box((1, 1, 1), 0)])
    assert builder.build().triangle_count == 24
    builder.clear()
    assert builder.build().is_empty


def test_helpers():
    assert hex_to_rgb(0x00ff00) == (0.0, 1.0, 0.0)
    assert scene_to_preview((1.0, 2.0, 3.0)) == (1.0, -3.0, 2.0)
    assert tuple(rotate_y((1.0, 0.0, 0.0), math.pi / 2)) == pytest.approx((0.0, 0.0, -1.0))


def test_scene_revision_and_lookup():
    scene = PreviewScene()
    start = scene.revision
    sphere = scene.create_sphere(1.0, 0)
    sphere.name = "marker"
    scene.attach(sphere)
    scene.attach(sphere)
    assert len(scene) == 1
    assert scene.revision == start + 1

    sphere.position = (1.0, 0.0, 0.0)
    assert scene.revision == start + 2
    assert scene.get_object_by_name("marker") is sphere

    scene.detach(sphere)
    sphere.position = (2.0, 0.0, 0.0)
    assert scene.revision == start + 3
    assert scene.build_mesh().is_empty
