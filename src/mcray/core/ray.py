"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the vector helpers used throughout
the tracer. A single 3-component type, ``vec3``, stands in for points,
directions and colors; arithmetic, scaling and component-wise products come
straight from ``taichi.math``.

Random sampling helpers draw from an explicit sampler stream (see
``mcray.core.sampler``) instead of a hidden global generator.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def walk() -> vec3:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 2.0)
"""

import taichi as ti
import taichi.math as tm

from mcray.core.sampler import random_float

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components below this magnitude count as zero
NEAR_ZERO_EPSILON = 1e-8

# Upper bound on rejection-sampling attempts per draw
MAX_REJECTION_ATTEMPTS = 64


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Not required to be unit
            length; camera rays are not normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Divide a vector by its length.

    The result is undefined (NaN components) for a zero-length input, so
    callers must rule that case out first.
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether every component is below NEAR_ZERO_EPSILON in magnitude.

    Used to catch degenerate scatter directions.

    Returns:
        1 if the vector is near zero, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v about the unit normal n: r = v - 2 (v . n) n."""
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f32) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The result is split into the component perpendicular to the normal and
    the component parallel to it. Callers check for total internal
    reflection beforehand; this function does not.

    Args:
        uv: Unit incident direction.
        n: Unit normal on the incident side.
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction (unit length for unit inputs).
    """
    cos_theta = tm.min(-tm.dot(uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Schlick's approximation of Fresnel reflectance.

    r0 = ((1 - n) / (1 + n))^2, reflectance = r0 + (1 - r0)(1 - cos)^5.
    For matched media (ref_idx == 1) there is no interface and the
    reflectance is exactly zero.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    reflectance = 0.0
    if ref_idx != 1.0:
        reflectance = r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)
    return reflectance


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_vec3(stream: ti.i32, low: ti.f32, high: ti.f32) -> vec3:
    """Random vector with each component uniform in [low, high)."""
    span = high - low
    return vec3(
        low + span * random_float(stream),
        low + span * random_float(stream),
        low + span * random_float(stream),
    )


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Rejection-sample a point inside the unit ball.

    Returns:
        A point with squared length <= 1 (the origin if every attempt fails).
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = random_vec3(stream, -1.0, 1.0)
            if length_squared(candidate) <= 1.0:
                p = candidate
                found = True
    return p


@ti.func
def random_unit_vector(stream: ti.i32) -> vec3:
    """Uniformly distributed unit vector.

    Samples [-1, 1]^3, keeps points inside the unit ball and normalizes them.
    Points so close to the origin that normalizing would blow up are
    rejected as well.
    """
    result = vec3(0.0, 0.0, 1.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = random_vec3(stream, -1.0, 1.0)
            lensq = length_squared(p)
            if 1e-30 < lensq and lensq <= 1.0:
                result = p / ti.sqrt(lensq)
                found = True
    return result


@ti.func
def random_in_unit_disk(stream: ti.i32) -> vec3:
    """Rejection-sample a point (x, y, 0) inside the unit disk.

    Used for defocus-disk (depth of field) sampling.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                2.0 * random_float(stream) - 1.0,
                2.0 * random_float(stream) - 1.0,
                0.0,
            )
            if candidate.x * candidate.x + candidate.y * candidate.y < 1.0:
                p = candidate
                found = True
    return p
