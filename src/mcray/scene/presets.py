"""Ready-made demonstration scenes.

The material showcase places one sphere of each material on a large diffuse
ground sphere:

- Center: blue-ish diffuse sphere
- Left: glass sphere with an air bubble inside (a hollow glass shell)
- Right: gold metal with heavy fuzz
- Front: two small marbles sharing the left sphere's glass material

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.camera.camera import Camera
    >>> from mcray.scene.presets import create_material_showcase_scene
    >>> scene, config = create_material_showcase_scene()
    >>> pixels = Camera(config).render(scene)
"""

from dataclasses import dataclass

from mcray.camera.camera import CameraConfig
from mcray.scene.manager import SceneManager


@dataclass
class ShowcaseParams:
    """Adjustable parts of the material showcase.

    Attributes:
        glass_index: Refraction index of the glass spheres.
        metal_fuzz: Roughness of the metal sphere.
        image_width: Output width in pixels.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Bounce budget.
    """

    glass_index: float = 1.5
    metal_fuzz: float = 1.0
    image_width: int = 400
    samples_per_pixel: int = 100
    max_depth: int = 50


def create_material_showcase_scene(
    params: ShowcaseParams | None = None,
) -> tuple[SceneManager, CameraConfig]:
    """Build the material showcase.

    Args:
        params: Scene and render settings. Defaults to ShowcaseParams().

    Returns:
        Tuple of (scene, camera_config). The scene is already loaded into
        the scene fields.
    """
    if params is None:
        params = ShowcaseParams()

    scene = SceneManager()

    ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
    center = scene.add_lambertian_material((0.1, 0.2, 0.5))
    glass = scene.add_dielectric_material(params.glass_index)
    # Air inside glass: the inverse index
    bubble = scene.add_dielectric_material(1.0 / params.glass_index)
    gold = scene.add_metal_material((0.8, 0.6, 0.2), params.metal_fuzz)

    scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.2), 0.5, center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, glass)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.4, bubble)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)
    scene.add_sphere((-0.35, -0.4, -0.45), 0.1, glass)
    scene.add_sphere((0.35, -0.4, -0.45), 0.1, glass)

    config = CameraConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=params.image_width,
        samples_per_pixel=params.samples_per_pixel,
        max_depth=params.max_depth,
        vfov=20.0,
        look_from=(-2.0, 2.0, 1.0),
        look_at=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=10.0,
        focus_dist=3.4,
    )

    return scene, config
