"""
GLSL shaders for the maze preview.

Elements are flat colored boxes, so shading is a headlight plus a sky/ground
hemisphere term. The uv attribute in the vertex buffer is not read.
"""

VERTEX_SHADER = """
#version 330 core

layout(location = 0) in vec3 aPos;
layout(location = 1) in vec3 aNormal;
layout(location = 3) in vec3 aColor;

out vec3 vNormal;
out vec3 vToEye;
out vec3 vColor;

uniform mat4 viewProjection;
uniform vec3 eyePos;

void main() {
    vNormal = aNormal;
    vToEye = eyePos - aPos;
    vColor = aColor;
    gl_Position = viewProjection * vec4(aPos, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 330 core

in vec3 vNormal;
in vec3 vToEye;
in vec3 vColor;

out vec4 FragColor;

uniform float ambient;
uniform float headlight;

void main() {
    vec3 n = normalize(vNormal);
    // Sky above, ground below (Z-up)
    float hemi = mix(0.6, 1.0, n.z * 0.5 + 0.5);
    float lambert = abs(dot(n, normalize(vToEye)));
    float light = ambient * hemi + headlight * lambert;
    FragColor = vec4(vColor * min(light, 1.0), 1.0);
}
"""

LINE_VERTEX_SHADER = """
#version 330 core

layout(location = 0) in vec3 aPos;
layout(location = 1) in vec3 aColor;

out vec3 vColor;

uniform mat4 viewProjection;

void main() {
    vColor = aColor;
    gl_Position = viewProjection * vec4(aPos, 1.0);
}
"""

LINE_FRAGMENT_SHADER = """
#version 330 core

in vec3 vColor;
out vec4 FragColor;

void main() {
    FragColor = vec4(vColor, 1.0);
}
"""
