"""
Preview module for real-time 3D visualization of generated mazes.

Provides a QOpenGLWidget-based preview with orbit camera controls, fed by a
PreviewScene.
"""

from .preview_widget import PreviewWidget
from .camera import OrbitCamera
from .renderer import PreviewRenderer, RenderMode

__all__ = ['PreviewWidget', 'OrbitCamera', 'PreviewRenderer', 'RenderMode']
