"""Metal (specular reflective) material implementation.

A metal mirrors the incoming direction about the surface normal:

    R = I - 2(I . N)N

For rough metals the unit reflected direction is offset by a random unit
vector scaled by ``fuzz``. A large offset can push the outgoing direction
below the surface; such rays are absorbed rather than scattered.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.materials.metal import add_metal_material
    >>> idx = add_metal_material((0.8, 0.6, 0.2), fuzz=0.3)
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray, random_unit_vector, reflect, unit_vector
from mcray.geometry.hittable import HitRecord
from mcray.materials.material import ScatterRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: Surface roughness in [0, 1].
        ray_in: The incoming ray.
        rec: The hit record of the struck surface.
        stream: Sampler stream for the fuzz perturbation.

    Returns:
        A ScatterRecord with attenuation == albedo, or an absorbed record
        when the perturbed direction does not leave the surface.
    """
    reflected = reflect(ray_in.direction, rec.normal)
    direction = unit_vector(reflected) + fuzz * random_unit_vector(stream)

    scattered = 0
    if tm.dot(direction, rec.normal) > 0.0:
        scattered = 1

    return ScatterRecord(
        scattered=scattered,
        attenuation=albedo,
        origin=rec.point,
        direction=direction,
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzz: float = 0.0,
) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B) tuple.
            Each component should be in [0, 1].
        fuzz: The surface roughness. Values are clamped to [0, 1].

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

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzes[idx] = clamp_fuzz(fuzz)
    num_metal_materials[None] = idx + 1
    return idx


def clamp_fuzz(fuzz: float) -> float:
    """Clamp a roughness value into [0, 1]."""
    return min(max(fuzz, 0.0), 1.0)


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


def get_metal_fuzz_value(material_idx: int) -> float:
    """Read back the stored (clamped) fuzz of a metal material."""
    return float(metal_fuzzes[material_idx])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f32:
    return metal_fuzzes[material_idx]


@ti.func
def scatter_metal_by_id(
    material_idx: ti.i32,
    ray_in: Ray,
    rec: HitRecord,
    stream: ti.i32,
) -> ScatterRecord:
    """Scatter off the metal material stored at a registry index."""
    return scatter_metal(
        get_metal_albedo(material_idx),
        get_metal_fuzz(material_idx),
        ray_in,
        rec,
        stream,
    )
