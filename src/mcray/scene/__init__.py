"""Scene module: sphere storage, scene manager and preset scenes.

Scene data is kept in Taichi fields (structure-of-arrays layout) so kernels
can read it directly. The SceneManager is the Python-side builder that keeps
materials and spheres consistent.
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import MaterialInfo, SceneConfig, SceneManager, SphereInfo
from .presets import ShowcaseParams, create_material_showcase_scene

__all__ = [
    "MAX_SPHERES",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "ShowcaseParams",
    "create_material_showcase_scene",
]
