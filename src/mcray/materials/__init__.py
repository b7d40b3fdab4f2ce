"""Materials module for light scattering models.

Components:
    material: ScatterRecord, MaterialType and the unified material arena
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance

Every scatter function takes the incoming ray, the hit record and a sampler
stream, and returns a ScatterRecord.
"""

from .dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_index,
    get_dielectric_material_count,
    get_dielectric_tint,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    scatter_lambertian_by_id,
)
from .material import (
    MAX_MATERIALS,
    MaterialType,
    ScatterRecord,
    clear_material_arena,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Arena
    "MaterialType",
    "ScatterRecord",
    "MAX_MATERIALS",
    "register_material",
    "clear_material_arena",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
    # Lambertian
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    # Dielectric
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_index",
    "get_dielectric_tint",
]
