"""Taichi-based Monte Carlo ray tracer.

This package renders spheres lit by a sky gradient, with support for:
- Diffuse, metal and dielectric (glass) materials shared between spheres
- Anti-aliasing by jittered sampling
- Depth of field through a thin-lens camera
- Pixel-parallel rendering with reproducible, seedable sampling

Subpackages:
    core: Vector utilities, intervals, sampling and the render integrator
    geometry: Hit records and the sphere primitive
    materials: Scattering models and the unified material arena
    scene: Sphere storage, scene manager and preset scenes
    camera: Camera configuration and ray generation
    output: Image export

Taichi must be initialized (``ti.init``) before importing the subpackages,
since they allocate fields at import time.
"""

__version__ = "0.1.0"
