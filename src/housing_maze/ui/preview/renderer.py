"""
OpenGL renderer for the maze preview.

Solid elements and their edge outlines live in two GPU buffers. Contexts
older than OpenGL 3 draw the same buffers through the fixed-function
pipeline.
"""

import ctypes
import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

try:
    from OpenGL.GL import *
    from OpenGL.GL import shaders as gl_shaders
    OPENGL_AVAILABLE = True
except ImportError as e:
    OPENGL_AVAILABLE = False
    logger.warning("OpenGL import failed: %s", e)

from housing_maze.scene.mesh_builder import RenderMesh

from .shaders import FRAGMENT_SHADER, LINE_FRAGMENT_SHADER, LINE_VERTEX_SHADER, VERTEX_SHADER

FLOAT_SIZE = 4

# (attribute location, component count, float offset)
SOLID_LAYOUT = ((0, 3, 0), (1, 3, 3), (3, 3, 8))
SOLID_STRIDE = 11 * FLOAT_SIZE
LINE_LAYOUT = ((0, 3, 0), (1, 3, 3))
LINE_STRIDE = 6 * FLOAT_SIZE


class RenderMode(Enum):
    """Rendering mode for the preview."""
    SOLID = "solid"
    WIREFRAME = "wireframe"
    SOLID_WIREFRAME = "solid_wireframe"


class _GpuBuffer:
    """Vertex + index buffer pair, with a VAO on the shader pipeline."""

    def __init__(self, layout: Sequence[Tuple[int, int, int]], stride: int,
                 primitive: int, per_primitive: int, use_vao: bool):
        self.layout = layout
        self.stride = stride
        self.primitive = primitive
        self.per_primitive = per_primitive
        self.vao = glGenVertexArrays(1) if use_vao else None
        self.vbo = glGenBuffers(1)
        self.ebo = glGenBuffers(1)
        self.count = 0

    def upload(self, vertices: np.ndarray, indices: np.ndarray):
        self.count = len(indices)
        if self.count == 0:
            return
        if self.vao is not None:
            glBindVertexArray(self.vao)
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBufferData(GL_ARRAY_BUFFER, vertices.nbytes, vertices, GL_STATIC_DRAW)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.ebo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, indices.nbytes, indices, GL_STATIC_DRAW)
        if self.vao is not None:
            for location, size, offset in self.layout:
                glEnableVertexAttribArray(location)
                glVertexAttribPointer(location, size, GL_FLOAT, GL_FALSE, self.stride,
                                      ctypes.c_void_p(offset * FLOAT_SIZE))
            glBindVertexArray(0)

    def draw(self):
        if self.vao is not None:
            glBindVertexArray(self.vao)
            glDrawElements(self.primitive, self.count * self.per_primitive, GL_UNSIGNED_INT, None)
            glBindVertexArray(0)
            return

        # Fixed-function: position first, color last, normal in between if present
        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.ebo)
        position, *rest = self.layout
        color = rest[-1]
        glEnableClientState(GL_VERTEX_ARRAY)
        glVertexPointer(3, GL_FLOAT, self.stride, ctypes.c_void_p(position[2] * FLOAT_SIZE))
        glEnableClientState(GL_COLOR_ARRAY)
        glColorPointer(3, GL_FLOAT, self.stride, ctypes.c_void_p(color[2] * FLOAT_SIZE))
        if len(rest) > 1:
            glEnableClientState(GL_NORMAL_ARRAY)
            glNormalPointer(GL_FLOAT, self.stride, ctypes.c_void_p(rest[0][2] * FLOAT_SIZE))
        glDrawElements(self.primitive, self.count * self.per_primitive, GL_UNSIGNED_INT, None)
        glDisableClientState(GL_NORMAL_ARRAY)
        glDisableClientState(GL_COLOR_ARRAY)
        glDisableClientState(GL_VERTEX_ARRAY)

    def delete(self):
        if self.vao is not None:
            glDeleteVertexArrays(1, [self.vao])
        glDeleteBuffers(2, [self.vbo, self.ebo])


class PreviewRenderer:
    """Draws the maze's solid boxes and outlines."""

    def __init__(self):
        self._initialized = False
        self._use_legacy = False
        self._solid_program: Optional[int] = None
        self._line_program: Optional[int] = None
        self._solid: Optional[_GpuBuffer] = None
        self._lines: Optional[_GpuBuffer] = None

        self.render_mode = RenderMode.SOLID_WIREFRAME
        self.background_color = (0.94, 0.94, 0.94, 1.0)
        self.ambient = 0.45
        self.headlight = 0.6

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> bool:
        """Create programs and buffers. The GL context must be current."""
        if not OPENGL_AVAILABLE:
            logger.error("OpenGL not available; preview disabled")
            return False
        if self._initialized:
            return True

        version = glGetString(GL_VERSION)
        version_str = version.decode('utf-8') if version else ""
        try:
            self._use_legacy = int(version_str.split('.')[0]) < 3
        except ValueError:
            self._use_legacy = True
        logger.info("OpenGL %s (%s pipeline)", version_str or "unknown",
                    "fixed-function" if self._use_legacy else "shader")

        if not self._use_legacy:
            self._solid_program = self._link(VERTEX_SHADER, FRAGMENT_SHADER)
            self._line_program = self._link(LINE_VERTEX_SHADER, LINE_FRAGMENT_SHADER)
            if self._solid_program is None or self._line_program is None:
                return False

        use_vao = not self._use_legacy
        self._solid = _GpuBuffer(SOLID_LAYOUT, SOLID_STRIDE, GL_TRIANGLES, 3, use_vao)
        self._lines = _GpuBuffer(LINE_LAYOUT, LINE_STRIDE, GL_LINES, 2, use_vao)

        glEnable(GL_DEPTH_TEST)
        glDepthFunc(GL_LESS)
        glDisable(GL_CULL_FACE)

        self._initialized = True
        return True

    def _link(self, vs_source: str, fs_source: str) -> Optional[int]:
        # Linked by hand: compileProgram's validation step fails without a bound VAO
        try:
            stages = [gl_shaders.compileShader(vs_source, GL_VERTEX_SHADER),
                      gl_shaders.compileShader(fs_source, GL_FRAGMENT_SHADER)]
        except RuntimeError as e:
            logger.error("Shader compilation failed: %s", e)
            return None

        program = glCreateProgram()
        for stage in stages:
            glAttachShader(program, stage)
        glLinkProgram(program)
        for stage in stages:
            glDeleteShader(stage)
        if glGetProgramiv(program, GL_LINK_STATUS) != GL_TRUE:
            logger.error("Shader link failed: %s", glGetProgramInfoLog(program))
            glDeleteProgram(program)
            return None
        return program

    def upload_solid_mesh(self, mesh: RenderMesh):
        self._solid.upload(mesh.vertices, mesh.indices)

    def upload_wireframe_mesh(self, vertices: np.ndarray, indices: np.ndarray):
        self._lines.upload(vertices, indices)

    def render(self, view_matrix: np.ndarray, projection_matrix: np.ndarray,
               camera_position: np.ndarray):
        if not self._initialized:
            return

        glClearColor(*self.background_color)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        view_projection = projection_matrix @ view_matrix
        if self._use_legacy:
            glUseProgram(0)
            glMatrixMode(GL_PROJECTION)
            glLoadMatrixf(np.ascontiguousarray(projection_matrix.T, dtype=np.float32))
            glMatrixMode(GL_MODELVIEW)
            glLoadMatrixf(np.ascontiguousarray(view_matrix.T, dtype=np.float32))

        draw_solid = self.render_mode in (RenderMode.SOLID, RenderMode.SOLID_WIREFRAME)
        draw_lines = self.render_mode in (RenderMode.WIREFRAME, RenderMode.SOLID_WIREFRAME)

        if draw_solid and self._solid.count:
            self._draw_solid(view_projection, camera_position)
        if draw_lines and self._lines.count:
            # Pull outlines towards the camera so they sit on the faces
            if draw_solid:
                glEnable(GL_POLYGON_OFFSET_LINE)
                glPolygonOffset(-1.0, -1.0)
            if not self._use_legacy:
                glUseProgram(self._line_program)
                self._set_mat4(self._line_program, "viewProjection", view_projection)
            self._lines.draw()
            if draw_solid:
                glDisable(GL_POLYGON_OFFSET_LINE)

    def _draw_solid(self, view_projection: np.ndarray, eye: np.ndarray):
        if self._use_legacy:
            glEnable(GL_LIGHTING)
            glEnable(GL_LIGHT0)
            glEnable(GL_COLOR_MATERIAL)
            glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)
            glLightModeli(GL_LIGHT_MODEL_TWO_SIDE, GL_TRUE)
            glLightfv(GL_LIGHT0, GL_POSITION, [float(eye[0]), float(eye[1]), float(eye[2]), 1.0])
            glLightfv(GL_LIGHT0, GL_AMBIENT, [self.ambient, self.ambient, self.ambient, 1.0])
            glLightfv(GL_LIGHT0, GL_DIFFUSE, [self.headlight, self.headlight, self.headlight, 1.0])
            self._solid.draw()
            glDisable(GL_COLOR_MATERIAL)
            glDisable(GL_LIGHT0)
            glDisable(GL_LIGHTING)
            return

        glUseProgram(self._solid_program)
        self._set_mat4(self._solid_program, "viewProjection", view_projection)
        glUniform3fv(glGetUniformLocation(self._solid_program, "eyePos"), 1,
                     np.asarray(eye, dtype=np.float32))
        glUniform1f(glGetUniformLocation(self._solid_program, "ambient"), self.ambient)
        glUniform1f(glGetUniformLocation(self._solid_program, "headlight"), self.headlight)
        self._solid.draw()

    @staticmethod
    def _set_mat4(program: int, name: str, matrix: np.ndarray):
        location = glGetUniformLocation(program, name)
        if location >= 0:
            # Row-major numpy matrix, let OpenGL transpose
            glUniformMatrix4fv(location, 1, GL_TRUE, np.ascontiguousarray(matrix, dtype=np.float32))

    def cleanup(self):
        """Release GL objects. The GL context must be current."""
        if not self._initialized:
            return
        for program in (self._solid_program, self._line_program):
            if program:
                glDeleteProgram(program)
        self._solid.delete()
        self._lines.delete()
        self._initialized = False
