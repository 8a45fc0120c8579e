"""
Scene module: the rendering collaborator the maze engines draw into.
"""

from .elements import PreviewScene, Scene, SceneElement, Shape
from .mesh_builder import MeshBuilder, RenderMesh, build_scene_mesh, build_scene_wireframe

__all__ = [
    'Scene', 'SceneElement', 'Shape', 'PreviewScene',
    'MeshBuilder', 'RenderMesh', 'build_scene_mesh', 'build_scene_wireframe',
]
