"""Material interface and unified material-id arena.

Every material variant exposes the same scattering contract: given the
incoming ray, the hit record and a sampler stream, return a ``ScatterRecord``.
``scattered == 0`` means the surface absorbed the ray; otherwise the record
carries the attenuation color and the outgoing ray.

Primitives never own their materials. They store a unified material id that
indexes this arena; the arena maps the id to a variant (``MaterialType``) and
to a slot in that variant's parameter registry. Many primitives may share one
id, and the parameters exist exactly once.
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Enumeration of supported material variants.

    Used for material dispatch in the integrator.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class ScatterRecord:
    """Outcome of a scattering event.

    Attributes:
        scattered: 1 if the material produced an outgoing ray, 0 if it
            absorbed the incoming one.
        attenuation: Per-channel color multiplier for the outgoing ray.
        origin: Origin of the outgoing ray (the hit point).
        direction: Direction of the outgoing ray.
    """

    scattered: ti.i32
    attenuation: vec3
    origin: vec3
    direction: vec3


@ti.func
def make_absorbed_record() -> ScatterRecord:
    """A ScatterRecord for an absorbed ray."""
    return ScatterRecord(
        scattered=0,
        attenuation=vec3(0.0, 0.0, 0.0),
        origin=vec3(0.0, 0.0, 0.0),
        direction=vec3(0.0, 0.0, 0.0),
    )


# =============================================================================
# Unified Material Arena
# =============================================================================

# Maximum number of materials across all variants
MAX_MATERIALS = 768  # 256 per variant * 3 variants

# material_types[i] stores the MaterialType for material id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the variant-local registry slot of id i
# (e.g. if id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_material_arena() -> None:
    """Forget every unified material id."""
    num_materials[None] = 0


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign the next unified material id.

    Args:
        material_type: The variant of the material.
        type_index: Slot of the material in its variant's registry.

    Returns:
        The new unified material id.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of unified material ids in use."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the MaterialType of a unified material id.

    Returns:
        The material type as an integer, or -1 for invalid ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the variant-local registry slot of a unified material id.

    Returns:
        The registry slot, or -1 for invalid ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result
