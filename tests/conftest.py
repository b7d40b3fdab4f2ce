"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset scene, materials, render target and sampler around each test."""
    # Import here so that Taichi is initialized before fields are created
    from mcray.core.integrator import reset_render_target
    from mcray.core.sampler import seed_sampler, set_fixed_sample
    from mcray.materials.dielectric import clear_dielectric_materials
    from mcray.materials.lambertian import clear_lambertian_materials
    from mcray.materials.material import clear_material_arena
    from mcray.materials.metal import clear_metal_materials
    from mcray.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_material_arena()
        reset_render_target()
        set_fixed_sample(None)

    _clear_all()
    seed_sampler(42)

    yield

    _clear_all()
