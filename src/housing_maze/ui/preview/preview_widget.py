"""
OpenGL preview of the generated maze.

`PreviewWidget` watches a PreviewScene and rebuilds the GPU buffers when the
scene's revision moves (new maze, cleared maze, highlighted element).

Controls: left-drag orbits, right- or Alt+left-drag pans, the wheel zooms,
WASD/QE walk the orbit target, 1-6 pick a preset view and F refits.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PyQt5.QtCore import QPoint, Qt, QTimer
from PyQt5.QtGui import QKeyEvent, QMouseEvent, QSurfaceFormat, QWheelEvent
from PyQt5.QtWidgets import QHBoxLayout, QLabel, QOpenGLWidget, QPushButton, QVBoxLayout, QWidget

from housing_maze.scene import PreviewScene, RenderMesh

from .camera import OrbitCamera
from .renderer import PreviewRenderer, RenderMode

logger = logging.getLogger(__name__)

# key -> (forward, right, up)
MOVE_KEYS = {
    Qt.Key_W: (1, 0, 0),
    Qt.Key_S: (-1, 0, 0),
    Qt.Key_D: (0, 1, 0),
    Qt.Key_A: (0, -1, 0),
    Qt.Key_E: (0, 0, 1),
    Qt.Key_Q: (0, 0, -1),
}
PRESET_KEYS = {
    Qt.Key_1: 'front',
    Qt.Key_2: 'back',
    Qt.Key_3: 'left',
    Qt.Key_4: 'right',
    Qt.Key_5: 'top',
    Qt.Key_6: 'iso',
}
MOVE_INTERVAL_MS = 16
POLL_INTERVAL_MS = 50


def _surface_format() -> QSurfaceFormat:
    fmt = QSurfaceFormat()
    fmt.setDepthBufferSize(24)
    fmt.setSamples(4)
    fmt.setSwapBehavior(QSurfaceFormat.DoubleBuffer)
    return fmt


class MazeView(QOpenGLWidget):
    """GL canvas: owns the camera and renderer and handles input."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFormat(_surface_format())
        self.setFocusPolicy(Qt.StrongFocus)

        self.camera = OrbitCamera()
        self.renderer = PreviewRenderer()
        self._mesh: Optional[RenderMesh] = None
        self._lines: Optional[Tuple[np.ndarray, np.ndarray]] = None
        self._gl_ready = False

        self._drag_origin: Optional[QPoint] = None
        self._drag_mode: Optional[str] = None
        self._held = set()
        self._move_timer = QTimer(self)
        self._move_timer.timeout.connect(self._step_movement)

    # --- GL lifecycle ---

    def initializeGL(self):
        self._gl_ready = self.renderer.initialize()
        if not self._gl_ready:
            logger.warning("Preview renderer unavailable")
            return
        self._upload()

    def resizeGL(self, w: int, h: int):
        self.camera.set_aspect(w, h)

    def paintGL(self):
        if self._gl_ready:
            self.renderer.render(self.camera.get_view_matrix(),
                                 self.camera.get_projection_matrix(),
                                 self.camera.get_position())

    def _upload(self):
        if self._mesh is not None:
            self.renderer.upload_solid_mesh(self._mesh)
        if self._lines is not None:
            self.renderer.upload_wireframe_mesh(*self._lines)

    def set_geometry(self, mesh: RenderMesh, lines: Tuple[np.ndarray, np.ndarray]):
        """Replace the drawn geometry; held until GL is ready."""
        self._mesh = mesh
        self._lines = lines
        if not self._gl_ready:
            return
        self.makeCurrent()
        self._upload()
        self.doneCurrent()
        self.update()

    def release(self):
        if self._gl_ready:
            self.makeCurrent()
            self.renderer.cleanup()
            self.doneCurrent()
        self._move_timer.stop()

    # --- camera helpers ---

    def fit_to_bounds(self):
        if self._mesh is None or self._mesh.is_empty:
            return
        self.camera.fit_to_bounds(self._mesh.bounds_min, self._mesh.bounds_max)
        self.update()

    def set_render_mode(self, mode: RenderMode):
        self.renderer.render_mode = mode
        self.update()

    def set_preset_view(self, preset: str):
        self.camera.set_preset_view(preset)
        self.update()

    # --- input ---

    def mousePressEvent(self, event: QMouseEvent):
        self._drag_origin = event.pos()
        alt = bool(event.modifiers() & Qt.AltModifier)
        if event.button() == Qt.LeftButton and not alt:
            self._drag_mode = 'orbit'
        elif event.button() in (Qt.RightButton, Qt.MiddleButton, Qt.LeftButton):
            self._drag_mode = 'pan'
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._drag_origin = None
        self._drag_mode = None
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._drag_origin is None:
            return
        delta = event.pos() - self._drag_origin
        self._drag_origin = event.pos()
        if self._drag_mode == 'orbit':
            self.camera.rotate(-delta.x(), delta.y())
        elif self._drag_mode == 'pan':
            self.camera.pan(delta.x(), delta.y())
        self.update()
        event.accept()

    def wheelEvent(self, event: QWheelEvent):
        self.camera.zoom(event.angleDelta().y() / 120.0)
        self.update()
        event.accept()

    def keyPressEvent(self, event: QKeyEvent):
        key = event.key()
        if key in MOVE_KEYS:
            if not event.isAutoRepeat():
                self._held.add(key)
                if not self._move_timer.isActive():
                    self._move_timer.start(MOVE_INTERVAL_MS)
        elif key in PRESET_KEYS:
            self.set_preset_view(PRESET_KEYS[key])
        elif key == Qt.Key_F:
            self.fit_to_bounds()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.key() in MOVE_KEYS and not event.isAutoRepeat():
            self._held.discard(event.key())
            if not self._held:
                self._move_timer.stop()
            event.accept()
            return
        super().keyReleaseEvent(event)

    def focusOutEvent(self, event):
        self._held.clear()
        self._move_timer.stop()
        super().focusOutEvent(event)

    def _step_movement(self):
        forward = right = up = 0
        for key in self._held:
            f, r, u = MOVE_KEYS[key]
            forward += f
            right += r
            up += u
        if forward or right or up:
            self.camera.move_continuous(float(forward), float(right), float(up))
            self.update()


class PreviewWidget(QWidget):
    """Preview panel: GL canvas plus a render-mode toolbar, bound to a PreviewScene."""

    def __init__(self, scene: PreviewScene, parent=None):
        super().__init__(parent)
        self._scene = scene
        self._seen_revision = -1
        self._fit_pending = True

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._view = MazeView()
        layout.addWidget(self._view, stretch=1)
        layout.addLayout(self._build_toolbar())

        self._poll_timer = QTimer(self)
        self._poll_timer.timeout.connect(self.refresh)
        self._poll_timer.start(POLL_INTERVAL_MS)

    def _build_toolbar(self) -> QHBoxLayout:
        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 4)
        for label, mode in (("Solid", RenderMode.SOLID),
                            ("Outlines", RenderMode.WIREFRAME),
                            ("Both", RenderMode.SOLID_WIREFRAME)):
            button = QPushButton(label)
            button.clicked.connect(lambda _checked=False, m=mode: self._view.set_render_mode(m))
            toolbar.addWidget(button)
        toolbar.addStretch()

        fit = QPushButton("Fit (F)")
        fit.clicked.connect(self._view.fit_to_bounds)
        toolbar.addWidget(fit)

        self._stats = QLabel("")
        self._stats.setStyleSheet("color: #a0a0a0;")
        toolbar.addWidget(self._stats)
        return toolbar

    def request_fit(self):
        """Refit the camera on the next rebuild."""
        self._fit_pending = True

    def refresh(self):
        """Rebuild buffers if the scene changed since the last call."""
        if self._scene.revision == self._seen_revision:
            return
        self._seen_revision = self._scene.revision

        mesh = self._scene.build_mesh()
        self._view.set_geometry(mesh, self._scene.build_wireframe())
        if self._fit_pending and not mesh.is_empty:
            self._view.fit_to_bounds()
            self._fit_pending = False

        self._stats.setText(f"{len(self._scene)} elements | {mesh.triangle_count} tris")
        logger.debug("Preview rebuilt at revision %d", self._seen_revision)

    def fit_to_bounds(self):
        self._view.fit_to_bounds()

    def cleanup(self):
        self._poll_timer.stop()
        self._view.release()
