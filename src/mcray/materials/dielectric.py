"""Dielectric (glass/water) material implementation.

This module implements transparent materials that both reflect and refract.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when sin(theta_t) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance probability, which increases at grazing angles.
Either way the outgoing ray is attenuated by a per-channel ``tint``; clear
glass uses white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.materials.dielectric import add_dielectric_material
    >>> glass = add_dielectric_material(1.5)
    >>> green_glass = add_dielectric_material(1.5, tint=(0.8, 1.0, 0.8))
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray, reflect, refract, schlick_reflectance, unit_vector
from mcray.core.sampler import random_float
from mcray.geometry.hittable import HitRecord
from mcray.materials.material import ScatterRecord

# Type alias for 3D vectors
vec3 = tm.vec3

# Clear glass
DEFAULT_TINT = (1.0, 1.0, 1.0)


@ti.func
def refraction_ratio_for(refraction_index: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of indices across the surface, incident over transmitted."""
    ratio = 1.0 / refraction_index
    if front_face == 0:
        ratio = refraction_index
    return ratio


@ti.func
def will_reflect(refraction_ratio: ti.f32, cos_theta: ti.f32) -> ti.i32:
    """1 when Snell's law has no solution (total internal reflection)."""
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    return refraction_ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    refraction_index: ti.f32,
    tint: vec3,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter a ray through a dielectric surface.

    Args:
        refraction_index: Index of refraction of the material.
        tint: Per-channel attenuation.
        ray_in: The incoming ray. Its direction need not be normalized.
        rec: The hit record of the struck surface.
        stream: Sampler stream for the reflect-or-refract choice.

    Returns:
        A ScatterRecord that always scatters, with attenuation == tint and a
        unit-length outgoing direction.
    """
    ratio = refraction_ratio_for(refraction_index, rec.front_face)

    unit_direction = unit_vector(ray_in.direction)
    cos_theta = tm.min(tm.dot(-unit_direction, rec.normal), 1.0)

    direction = vec3(0.0, 0.0, 0.0)
    if will_reflect(ratio, cos_theta) or random_float(stream) < schlick_reflectance(
        cos_theta, ratio
    ):
        direction = reflect(unit_direction, rec.normal)
    else:
        direction = refract(unit_direction, rec.normal, ratio)

    return ScatterRecord(
        scattered=1,
        attenuation=tint,
        origin=rec.point,
        direction=direction,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

# Storage for dielectric material properties
dielectric_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
dielectric_tints = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(
    refraction_index: float = 1.5,
    tint: tuple[float, float, float] = DEFAULT_TINT,
) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Index of refraction. Default is 1.5 (typical glass).
            Must be positive.
        tint: Per-channel attenuation as (R, G, B), each in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the refraction index is not positive or a tint
            component is outside [0, 1].
    """
    if refraction_index <= 0.0:
        raise ValueError(
            f"Refraction index = {refraction_index} must be positive."
        )
    for i, component in enumerate(tint):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Tint component {i} = {component} is outside [0, 1].")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[idx] = refraction_index
    dielectric_tints[idx] = vec3(tint[0], tint[1], tint[2])
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_index(material_idx: ti.i32) -> ti.f32:
    return dielectric_indices[material_idx]


@ti.func
def get_dielectric_tint(material_idx: ti.i32) -> vec3:
    return dielectric_tints[material_idx]


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter through the dielectric material stored at a registry index.

    Convenience function that looks up the refraction index and tint from
    the material registry and calls scatter_dielectric.
    """
    return scatter_dielectric(
        get_dielectric_index(material_idx),
        get_dielectric_tint(material_idx),
        ray_in,
        rec,
        stream,
    )
