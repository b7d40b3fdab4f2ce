"""Monte Carlo light transport and the pixel-parallel render driver.

This module turns camera rays into pixel colors:

    - ``ray_color`` follows a ray through the scene, multiplying in the
      attenuation of every surface it scatters off, until it escapes to the
      sky, is absorbed, or runs out of bounces.
    - ``render_image`` launches one kernel whose outer loop runs over all
      pixels in parallel. Each pixel averages its samples, gamma-encodes the
      result and stores it as 8-bit RGB.

The bounce budget is the only termination guarantee. A path that is still
scattering when the budget runs out contributes black, which slightly
darkens deep inter-reflections.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.camera.camera import Camera, CameraConfig
    >>> from mcray.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
    >>> pixels = Camera(CameraConfig(image_width=64)).render(scene)
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from mcray.camera.camera import get_ray
from mcray.core.interval import make_interval
from mcray.core.ray import Ray, make_ray, unit_vector
from mcray.core.sampler import ensure_seeded, pixel_stream
from mcray.geometry.hittable import HitRecord
from mcray.materials.dielectric import scatter_dielectric_by_id
from mcray.materials.lambertian import scatter_lambertian_by_id
from mcray.materials.material import (
    MaterialType,
    ScatterRecord,
    get_material_type,
    get_material_type_index,
    make_absorbed_record,
)
from mcray.materials.metal import scatter_metal_by_id
from mcray.scene.intersection import intersect_scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Hits closer than T_MIN are ignored to avoid shadow acne
T_MIN = 0.001
T_MAX = tm.inf

# Largest byte value reachable after clamping
INTENSITY_MAX = 0.999


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# 8-bit RGB output, indexed [column, row] with row 0 at the top
_pixel_buffer = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    _pixel_buffer.fill(0)


def reset_render_target() -> None:
    """Forget the active render target."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Background and Tone Mapping
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Blend white into sky blue by the height of the unit direction."""
    unit_direction = unit_vector(direction)
    a = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - a) * vec3(1.0, 1.0, 1.0) + a * vec3(0.5, 0.7, 1.0)


@ti.func
def linear_to_gamma(linear_component: ti.f32) -> ti.f32:
    """Gamma 2 encoding; non-positive input maps to 0."""
    result = 0.0
    if linear_component > 0.0:
        result = ti.sqrt(linear_component)
    return result


@ti.func
def to_byte(linear_component: ti.f32) -> ti.i32:
    """Gamma-encode, clamp to [0, 0.999] and quantize one channel."""
    c = tm.clamp(linear_to_gamma(linear_component), 0.0, INTENSITY_MAX)
    return ti.cast(256.0 * c, ti.i32)


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(ray_in: Ray, rec: HitRecord, stream: ti.i32) -> ScatterRecord:
    """Dispatch to the scatter function of the struck surface's material.

    Unknown material ids absorb the ray.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    result = make_absorbed_record()
    if mat_type == int(MaterialType.LAMBERTIAN):
        result = scatter_lambertian_by_id(type_index, ray_in, rec, stream)
    elif mat_type == int(MaterialType.METAL):
        result = scatter_metal_by_id(type_index, ray_in, rec, stream)
    elif mat_type == int(MaterialType.DIELECTRIC):
        result = scatter_dielectric_by_id(type_index, ray_in, rec, stream)
    return result


# =============================================================================
# Light Transport
# =============================================================================


@ti.func
def ray_color(ray: Ray, depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Equivalent to the recursion

        color(ray, 0) = black
        color(ray, d) = attenuation * color(scattered, d - 1)   on scatter
                      = black                                   on absorb
                      = sky(ray)                                on miss

    evaluated as a loop over a running attenuation product.

    Args:
        ray: The ray to follow.
        depth: Remaining bounce budget.
        stream: Sampler stream used for every scattering decision.

    Returns:
        The linear RGB radiance estimate.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    active = 1
    for _ in range(depth):
        if active == 1:
            rec = intersect_scene(current, make_interval(T_MIN, T_MAX))
            if rec.hit == 0:
                color = throughput * sky_color(current.direction)
                active = 0
            else:
                srec = scatter_material(current, rec, stream)
                if srec.scattered == 0:
                    active = 0
                else:
                    throughput *= srec.attenuation
                    current = make_ray(srec.origin, srec.direction)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    scale: ti.f32,
):
    for i, j in ti.ndrange(width, height):
        stream = pixel_stream(i, j)
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            ray = get_ray(i, j, stream)
            pixel_color += ray_color(ray, max_depth, stream)

        pixel_color *= scale
        _pixel_buffer[i, j] = ti.Vector(
            [
                ti.cast(to_byte(pixel_color.x), ti.u8),
                ti.cast(to_byte(pixel_color.y), ti.u8),
                ti.cast(to_byte(pixel_color.z), ti.u8),
            ]
        )


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth, pixel_stream(0, 0))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image(samples_per_pixel: int, max_depth: int, scale: float | None = None) -> None:
    """Render every pixel of the active render target.

    The camera fields must already hold the view (see Camera.setup).

    Args:
        samples_per_pixel: Number of samples averaged per pixel.
        max_depth: Bounce budget of each sample.
        scale: Factor applied to the summed samples. Defaults to
            1 / samples_per_pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples_per_pixel is not positive or max_depth is
            negative.
    """
    _check_render_target_initialized()
    if samples_per_pixel <= 0:
        raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    if scale is None:
        scale = 1.0 / samples_per_pixel

    ensure_seeded()
    width, height = get_image_dimensions()
    logger.debug("Launching render kernel over %dx%d pixels", width, height)
    _render_kernel(width, height, samples_per_pixel, max_depth, scale)


def get_image_numpy() -> np.ndarray:
    """Get the rendered image as a NumPy array.

    Returns:
        A (height, width, 3) uint8 array with row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _pixel_buffer.to_numpy()

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.uint8)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int,
) -> tuple[float, float, float]:
    """Evaluate ray_color for a single ray from Python.

    Uses the sampler stream of pixel (0, 0). Intended for testing and
    debugging individual rays.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    ensure_seeded()
    color = _trace_ray_kernel(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))
