"""
Orbit camera for the maze preview.

The camera circles a target point at a given distance. The preview is Z-up,
so azimuth turns about Z and elevation tilts away from the XY plane.
"""

import math
from typing import Tuple

import numpy as np

WORLD_UP = np.array([0.0, 0.0, 1.0], dtype=np.float32)


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray = WORLD_UP) -> np.ndarray:
    """Row-major view matrix looking from `eye` towards `target`."""
    forward = target - eye
    forward = forward / max(float(np.linalg.norm(forward)), 1e-6)
    right = np.cross(forward, up)
    norm = float(np.linalg.norm(right))
    if norm < 1e-6:
        # Straight down: any horizontal right vector will do
        right = np.array([1.0, 0.0, 0.0], dtype=np.float32)
    else:
        right = right / norm
    true_up = np.cross(right, forward)

    view = np.eye(4, dtype=np.float32)
    view[0, :3] = right
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[:3, 3] = -view[:3, :3] @ eye
    return view


class OrbitCamera:
    """Camera orbiting a target, sized to the generated maze."""

    MIN_ELEVATION = -85.0
    MAX_ELEVATION = 89.0
    MIN_DISTANCE = 1.0

    def __init__(self):
        self.target = np.zeros(3, dtype=np.float32)
        self.distance = 60.0
        self.azimuth = -90.0
        self.elevation = 40.0

        self.rotate_sensitivity = 0.4
        self.pan_sensitivity = 0.002
        self.zoom_factor = 0.85
        self.move_speed = 0.5

        self.fov = 45.0
        self.aspect = 1.0
        self.near = 0.1
        self.far = 2000.0

        self._home_target = self.target.copy()
        self._home_radius = 20.0

    def _offset(self) -> np.ndarray:
        az = math.radians(self.azimuth)
        el = math.radians(self.elevation)
        return self.distance * np.array([
            math.cos(el) * math.cos(az),
            math.cos(el) * math.sin(az),
            math.sin(el),
        ], dtype=np.float32)

    def get_position(self) -> np.ndarray:
        return self.target + self._offset()

    def get_view_matrix(self) -> np.ndarray:
        return look_at(self.get_position(), self.target)

    def get_projection_matrix(self) -> np.ndarray:
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        depth = self.near - self.far

        proj = np.zeros((4, 4), dtype=np.float32)
        proj[0, 0] = f / self.aspect
        proj[1, 1] = f
        proj[2, 2] = (self.far + self.near) / depth
        proj[2, 3] = 2.0 * self.far * self.near / depth
        proj[3, 2] = -1.0
        return proj

    def set_aspect(self, width: int, height: int):
        if height > 0:
            self.aspect = width / height

    def rotate(self, delta_x: float, delta_y: float):
        """Orbit around the target by a mouse delta in pixels."""
        self.azimuth = (self.azimuth + delta_x * self.rotate_sensitivity) % 360.0
        self.elevation = min(self.MAX_ELEVATION,
                             max(self.MIN_ELEVATION, self.elevation + delta_y * self.rotate_sensitivity))

    def _screen_axes(self) -> Tuple[np.ndarray, np.ndarray]:
        view = self.get_view_matrix()
        return view[0, :3], view[1, :3]

    def pan(self, delta_x: float, delta_y: float):
        """Slide the target in the screen plane; speed scales with distance."""
        right, up = self._screen_axes()
        scale = self.distance * self.pan_sensitivity
        self.target = self.target - right * delta_x * scale + up * delta_y * scale

    def zoom(self, steps: float):
        """Move towards the target; positive steps zoom in."""
        self.distance = max(self.MIN_DISTANCE, self.distance * self.zoom_factor ** steps)

    def move_continuous(self, forward_amount: float, right_amount: float, up_amount: float = 0.0):
        """Walk the target over the ground plane (W/S, A/D) and up or down (Q/E)."""
        az = math.radians(self.azimuth)
        # Forward is the horizontal direction from the camera to the target
        forward = np.array([-math.cos(az), -math.sin(az), 0.0], dtype=np.float32)
        right = np.cross(forward, WORLD_UP)
        step = self.move_speed * max(self.distance / 60.0, 0.25)
        self.target = self.target + (forward * forward_amount + right * right_amount
                                     + WORLD_UP * up_amount) * step

    def fit_to_bounds(self, min_pt: Tuple[float, float, float],
                      max_pt: Tuple[float, float, float]):
        """Center on a bounding box and back off until all of it is visible."""
        lo = np.asarray(min_pt, dtype=np.float32)
        hi = np.asarray(max_pt, dtype=np.float32)
        radius = max(float(np.linalg.norm(hi - lo)) / 2, 1.0)

        self.target = (lo + hi) / 2
        self.distance = radius / math.sin(math.radians(self.fov) / 2) * 1.1
        self.far = max(2000.0, self.distance * 4)
        self._home_target = self.target.copy()
        self._home_radius = radius

    def set_preset_view(self, preset: str):
        """Jump to a named view of the last fitted bounds."""
        presets = {
            # (azimuth, elevation)
            'front': (-90.0, 0.0),
            'back': (90.0, 0.0),
            'left': (180.0, 0.0),
            'right': (0.0, 0.0),
            'top': (-90.0, self.MAX_ELEVATION),
            'iso': (-45.0, 35.0),
        }
        if preset not in presets:
            return
        self.azimuth, self.elevation = presets[preset]
        self.target = self._home_target.copy()
        self.distance = self._home_radius / math.sin(math.radians(self.fov) / 2) * 1.1
