"""Camera module for view configuration and primary ray generation."""

from .camera import Camera, CameraConfig, generate_ray, get_ray

__all__ = [
    "Camera",
    "CameraConfig",
    "get_ray",
    "generate_ray",
]
