"""Sphere primitive with ray-sphere intersection.

The intersection solves |ray(t) - center|^2 = radius^2 in the half-b form:

    oc = center - origin
    a = |direction|^2
    h = direction . oc
    c = |oc|^2 - radius^2
    discriminant = h^2 - a c
    t = (h -/+ sqrt(discriminant)) / a

The nearer root is tried first; a root only counts when it lies strictly
inside the caller's interval.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from mcray.core.interval import Interval, interval_surrounds
from mcray.core.ray import Ray, ray_at
from mcray.geometry.hittable import HitRecord, make_miss_record, set_face_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative float).
        material_id: Unified id of the sphere's material.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test against.
        ray_t: Acceptable ray parameters; a root must lie strictly inside.

    Returns:
        A HitRecord for the nearest acceptable root, or a miss record.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Nearest root first, then the far one
        root = (h - sqrt_d) / a
        valid = interval_surrounds(ray_t, root)
        if not valid:
            root = (h + sqrt_d) / a
            valid = interval_surrounds(ray_t, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            normal, front_face = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere, clamping a negative radius to zero."""
    return Sphere(center=center, radius=tm.max(radius, 0.0), material_id=material_id)
