"""Thin-lens camera: configuration, derived geometry and primary rays.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits on the plane of perfect focus, ``focus_dist`` in front of
the camera. Pixel (0, 0) is the upper-left pixel; ``pixel_delta_v`` points
down the image. Rays leave from a random point on the defocus disk and pass
through a jittered point inside the pixel. With ``defocus_angle <= 0`` the
disk has zero radius and every ray starts at the camera center.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.camera.camera import Camera, CameraConfig
    >>> camera = Camera(CameraConfig(image_width=400, aspect_ratio=16.0 / 9.0))
    >>> camera.image_height
    225
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from mcray.core.ray import Ray, make_ray, random_in_unit_disk, vec3
from mcray.core.sampler import (
    MAX_STREAM_HEIGHT,
    MAX_STREAM_WIDTH,
    ensure_seeded,
    random_float,
    stream_index,
)

if TYPE_CHECKING:
    from mcray.scene.manager import SceneManager

logger = logging.getLogger(__name__)


# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass
class CameraConfig:
    """Parameters of a camera and its render.

    Attributes:
        aspect_ratio: Width divided by height of the output image.
        image_width: Output width in pixels.
        samples_per_pixel: Number of jittered samples averaged per pixel.
        max_depth: Maximum number of ray bounces. 0 renders black.
        vfov: Vertical field of view in degrees.
        look_from: Camera position in world space.
        look_at: Point the camera is looking at.
        vup: Camera-relative up direction.
        defocus_angle: Cone angle in degrees of rays through each pixel.
            0 gives a pinhole camera.
        focus_dist: Distance from look_from to the plane of perfect focus.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    look_from: tuple[float, float, float] = (0.0, 0.0, 0.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.image_width <= 0:
            raise ValueError(f"image_width must be positive, got {self.image_width}")
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.focus_dist <= 0.0:
            raise ValueError(f"focus_dist must be positive, got {self.focus_dist}")
        if self.image_width > MAX_STREAM_WIDTH or self.image_height > MAX_STREAM_HEIGHT:
            raise ValueError(
                f"image size {self.image_width}x{self.image_height} exceeds the "
                f"maximum of {MAX_STREAM_WIDTH}x{MAX_STREAM_HEIGHT}"
            )

    @property
    def image_height(self) -> int:
        """Output height in pixels, at least 1."""
        return max(1, round(self.image_width / self.aspect_ratio))


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # One pixel right
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # One pixel down
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())


def _unit(v: np.ndarray, name: str) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm < 1e-12:
        raise ValueError(f"Degenerate camera basis: {name} has zero length")
    return v / norm


class Camera:
    """A configured camera with its derived, immutable viewing geometry.

    The geometry is computed once from a validated CameraConfig. It lives on
    the Python side as NumPy vectors and is copied into Taichi fields by
    setup(), which render() calls for you.

    Args:
        config: Camera parameters. Defaults to CameraConfig().

    Raises:
        ValueError: If look_from equals look_at or vup is parallel to the
            viewing direction.
    """

    def __init__(self, config: CameraConfig | None = None) -> None:
        self._config = config if config is not None else CameraConfig()
        cfg = self._config

        self._image_height = cfg.image_height
        self._pixel_samples_scale = 1.0 / cfg.samples_per_pixel

        look_from = np.array(cfg.look_from, dtype=np.float64)
        look_at = np.array(cfg.look_at, dtype=np.float64)
        vup = np.array(cfg.vup, dtype=np.float64)

        # Viewport on the focus plane
        theta = math.radians(cfg.vfov)
        h = math.tan(theta / 2.0)
        viewport_height = 2.0 * h * cfg.focus_dist
        viewport_width = viewport_height * cfg.image_width / self._image_height

        w = _unit(look_from - look_at, "look_from - look_at")
        u = _unit(np.cross(vup, w), "cross(vup, w)")
        v = np.cross(w, u)

        viewport_u = viewport_width * u
        viewport_v = viewport_height * -v

        self._center = look_from
        self._u, self._v, self._w = u, v, w
        self._pixel_delta_u = viewport_u / cfg.image_width
        self._pixel_delta_v = viewport_v / self._image_height

        viewport_upper_left = look_from - cfg.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
        self._pixel00_loc = viewport_upper_left + 0.5 * (self._pixel_delta_u + self._pixel_delta_v)

        defocus_radius = 0.0
        if cfg.defocus_angle > 0.0:
            defocus_radius = cfg.focus_dist * math.tan(math.radians(cfg.defocus_angle / 2.0))
        self._defocus_disk_u = u * defocus_radius
        self._defocus_disk_v = v * defocus_radius

        logger.debug(
            "Camera %dx%d center=%s pixel00=%s defocus_radius=%g",
            cfg.image_width,
            self._image_height,
            self._center.tolist(),
            self._pixel00_loc.tolist(),
            defocus_radius,
        )

    # =========================================================================
    # Derived Geometry
    # =========================================================================

    @property
    def config(self) -> CameraConfig:
        return self._config

    @property
    def image_width(self) -> int:
        return self._config.image_width

    @property
    def image_height(self) -> int:
        return self._image_height

    @property
    def pixel_samples_scale(self) -> float:
        return self._pixel_samples_scale

    @property
    def center(self) -> np.ndarray:
        return self._center.copy()

    @property
    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """The orthonormal basis (u, v, w)."""
        return self._u.copy(), self._v.copy(), self._w.copy()

    @property
    def pixel00_loc(self) -> np.ndarray:
        return self._pixel00_loc.copy()

    @property
    def pixel_delta_u(self) -> np.ndarray:
        return self._pixel_delta_u.copy()

    @property
    def pixel_delta_v(self) -> np.ndarray:
        return self._pixel_delta_v.copy()

    @property
    def defocus_disk_u(self) -> np.ndarray:
        return self._defocus_disk_u.copy()

    @property
    def defocus_disk_v(self) -> np.ndarray:
        return self._defocus_disk_v.copy()

    def info(self) -> dict[str, tuple[float, float, float]]:
        """Get the derived geometry for debugging.

        Returns:
            Dictionary with center, u, v, w, pixel00_loc, pixel_delta_u,
            pixel_delta_v, defocus_disk_u and defocus_disk_v.
        """
        vectors = {
            "center": self._center,
            "u": self._u,
            "v": self._v,
            "w": self._w,
            "pixel00_loc": self._pixel00_loc,
            "pixel_delta_u": self._pixel_delta_u,
            "pixel_delta_v": self._pixel_delta_v,
            "defocus_disk_u": self._defocus_disk_u,
            "defocus_disk_v": self._defocus_disk_v,
        }
        return {name: (float(x[0]), float(x[1]), float(x[2])) for name, x in vectors.items()}

    # =========================================================================
    # Rendering
    # =========================================================================

    def setup(self) -> None:
        """Copy the derived geometry into the camera fields used by get_ray."""
        _camera_center[None] = self._center.tolist()
        _pixel00_loc[None] = self._pixel00_loc.tolist()
        _pixel_delta_u[None] = self._pixel_delta_u.tolist()
        _pixel_delta_v[None] = self._pixel_delta_v.tolist()
        _defocus_disk_u[None] = self._defocus_disk_u.tolist()
        _defocus_disk_v[None] = self._defocus_disk_v.tolist()

    def render(self, scene: "SceneManager | None" = None) -> np.ndarray:
        """Render a scene.

        Args:
            scene: The SceneManager to render. It is uploaded into the scene
                fields first. With None, whatever the fields hold is rendered.

        Returns:
            A (height, width, 3) uint8 array, row 0 at the top.
        """
        from mcray.core.integrator import get_image_numpy, render_image, setup_render_target

        cfg = self._config
        width, height = cfg.image_width, self._image_height

        self.setup()
        setup_render_target(width, height)

        sphere_count = None
        if scene is not None:
            scene.load()
            sphere_count = scene.get_sphere_count()
        logger.info(
            "Rendering %dx%d, %d samples/pixel, max depth %d (spheres: %s)",
            width,
            height,
            cfg.samples_per_pixel,
            cfg.max_depth,
            sphere_count,
        )
        start = time.perf_counter()

        render_image(cfg.samples_per_pixel, cfg.max_depth, self._pixel_samples_scale)
        pixels = get_image_numpy()

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return pixels


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def sample_square(stream: ti.i32) -> vec3:
    """Random offset in the [-0.5, 0.5) x [-0.5, 0.5) unit square."""
    return vec3(random_float(stream) - 0.5, random_float(stream) - 0.5, 0.0)


@ti.func
def defocus_disk_sample(stream: ti.i32) -> vec3:
    """Random point on the defocus disk around the camera center."""
    p = random_in_unit_disk(stream)
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, stream: ti.i32) -> Ray:
    """Generate a jittered camera ray for pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        stream: Sampler stream of the pixel.

    Returns:
        A ray from the defocus disk toward a random point inside the pixel.
        The direction is not normalized.
    """
    offset = sample_square(stream)
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(pixel_i, ti.f32) + offset.x) * _pixel_delta_u[None]
        + (ti.cast(pixel_j, ti.f32) + offset.y) * _pixel_delta_v[None]
    )

    ray_origin = defocus_disk_sample(stream)
    return make_ray(ray_origin, pixel_sample - ray_origin)


# Scratch storage for generate_ray: row 0 = origin, row 1 = direction
_debug_ray = ti.Vector.field(3, dtype=ti.f32, shape=2)


@ti.kernel
def _get_ray_kernel(pixel_i: ti.i32, pixel_j: ti.i32, stream: ti.i32):
    ray = get_ray(pixel_i, pixel_j, stream)
    _debug_ray[0] = ray.origin
    _debug_ray[1] = ray.direction


def generate_ray(pixel_i: int, pixel_j: int) -> tuple[np.ndarray, np.ndarray]:
    """Generate one camera ray from Python, using the pixel's own stream.

    Requires setup() to have been called on a Camera.

    Returns:
        Tuple of (origin, direction) as float NumPy arrays.
    """
    ensure_seeded()
    _get_ray_kernel(pixel_i, pixel_j, stream_index(pixel_i, pixel_j))
    rows = _debug_ray.to_numpy()
    return rows[0], rows[1]
