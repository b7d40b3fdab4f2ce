"""Geometry module: hit records and intersectable primitives."""

from .hittable import NO_MATERIAL, HitRecord, make_miss_record, set_face_normal
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "NO_MATERIAL",
    "make_miss_record",
    "set_face_normal",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]
