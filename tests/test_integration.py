"""Integration tests for the end-to-end rendering pipeline.

These run the showcase scene from scene creation through PNG output at very
low resolution, the same path the example script takes.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import numpy as np
from PIL import Image


class TestShowcasePipeline:
    """Render the showcase and write it to disk."""

    def test_render_and_save(self, tmp_path) -> None:
        from mcray.camera.camera import Camera
        from mcray.output.export import save_png
        from mcray.scene.presets import ShowcaseParams, create_material_showcase_scene

        params = ShowcaseParams(image_width=48, samples_per_pixel=2, max_depth=5)
        scene, config = create_material_showcase_scene(params)
        pixels = Camera(config).render(scene)

        path = save_png(pixels, tmp_path / "showcase.png")
        with Image.open(path) as image:
            assert image.size == (48, 27)
            np.testing.assert_array_equal(np.asarray(image), pixels)

    def test_example_script_renders(self, tmp_path) -> None:
        from examples.render_spheres import render_spheres

        output = render_spheres(
            width=24,
            aspect_ratio=2.0,
            num_samples=1,
            max_depth=3,
            seed=5,
            output_path=str(tmp_path / "spheres.png"),
            quiet=True,
        )

        assert output.exists()
        with Image.open(output) as image:
            assert image.size == (24, 12)

    def test_example_script_is_reproducible(self, tmp_path) -> None:
        from examples.render_spheres import render_spheres

        kwargs = {"width": 16, "num_samples": 2, "max_depth": 4, "seed": 11, "quiet": True}
        first = render_spheres(output_path=str(tmp_path / "a.png"), **kwargs)
        second = render_spheres(output_path=str(tmp_path / "b.png"), **kwargs)

        with Image.open(first) as a, Image.open(second) as b:
            np.testing.assert_array_equal(np.asarray(a), np.asarray(b))
