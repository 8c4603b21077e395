from manhattan.camera.camera3d import Camera3D
from manhattan.camera.orbit import OrbitPath

__all__ = [
    "Camera3D",
    "OrbitPath",
]
