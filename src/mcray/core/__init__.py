"""Core rendering module.

Components:
    ray: Ray data structure, vector math and random direction sampling
    interval: Closed ranges for hit parameters and clamping
    sampler: Seedable per-pixel random streams
    integrator: Light transport and the render kernel
"""

from .interval import (
    Interval,
    empty_interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
    make_interval,
    universe_interval,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    unit_vector,
    vec3,
)
from .sampler import (
    ensure_seeded,
    is_fixed,
    pixel_stream,
    random_float,
    random_range,
    seed_sampler,
    set_fixed_sample,
    stream_index,
)

# Note: integrator is NOT imported here; it depends on camera, materials and
# scene, which import from this package. Use mcray.core.integrator directly.

__all__ = [
    "Interval",
    "make_interval",
    "empty_interval",
    "universe_interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "near_zero",
    "reflect",
    "refract",
    "schlick_reflectance",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "seed_sampler",
    "ensure_seeded",
    "set_fixed_sample",
    "is_fixed",
    "stream_index",
    "pixel_stream",
    "random_float",
    "random_range",
]
