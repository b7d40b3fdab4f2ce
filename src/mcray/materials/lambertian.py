"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters every incoming ray. The outgoing direction is
the surface normal plus a uniformly distributed unit vector, which yields a
cosine-weighted distribution over the hemisphere around the normal. The
attenuation is the albedo.

If the random unit vector happens to cancel the normal almost exactly, the
sum is a near-zero vector; the normal itself is used instead so that the
outgoing ray never has a degenerate direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.materials.lambertian import add_lambertian_material
    >>> idx = add_lambertian_material((0.8, 0.8, 0.0))
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray, near_zero, random_unit_vector
from mcray.geometry.hittable import HitRecord
from mcray.materials.material import ScatterRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, ray_in: Ray, rec: HitRecord, stream: ti.i32) -> ScatterRecord:
    """Scatter a ray off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        ray_in: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit record of the struck surface.
        stream: Sampler stream for the random direction.

    Returns:
        A ScatterRecord that always scatters, with attenuation == albedo and
        the outgoing ray starting at the hit point.
    """
    scatter_direction = rec.normal + random_unit_vector(stream)

    # Catch degenerate scatter direction
    if near_zero(scatter_direction):
        scatter_direction = rec.normal

    return ScatterRecord(
        scattered=1,
        attenuation=albedo,
        origin=rec.point,
        direction=scatter_direction,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.
            Each component should be in [0, 1] for energy conservation.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by registry index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(
    material_idx: ti.i32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter off the Lambertian material stored at a registry index."""
    return scatter_lambertian(get_lambertian_albedo(material_idx), ray_in, rec, stream)
