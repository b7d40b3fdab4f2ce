"""Hit records shared by every intersectable primitive.

Primitives implement the same intersection contract: given a ray and an
``Interval`` of acceptable parameters, return a ``HitRecord`` for the nearest
root strictly inside the interval, or a record with ``hit == 0``.

The record refers to the struck surface's material by id. Materials live in
the scene's material arena, so any number of primitives may share one.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Material id stored in records that did not hit anything
NO_MATERIAL = -1


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray struck a surface, 0 on a miss. The remaining fields
            are only meaningful when hit == 1.
        t: Ray parameter of the intersection.
        point: World-space intersection point.
        normal: Unit surface normal, flipped to face against the ray.
        front_face: 1 if the ray arrived from the outward side
            (dot(direction, outward_normal) < 0), 0 if from inside.
        material_id: Unified material id of the struck surface.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (normal, front_face).
    """
    front_face = 1
    normal = outward_normal
    if tm.dot(ray_direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return normal, front_face


@ti.func
def make_miss_record() -> HitRecord:
    """A HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=NO_MATERIAL,
    )
