"""Tests for PNG export."""

import numpy as np
import pytest
from PIL import Image


class TestSavePng:
    """Tests for save_png and pixel validation."""

    def test_round_trip_preserves_pixels(self, tmp_path):
        from mcray.output.export import save_png

        pixels = np.zeros((4, 6, 3), dtype=np.uint8)
        pixels[0, :, 0] = 255  # top row red
        pixels[3, 5] = (10, 20, 30)

        path = save_png(pixels, tmp_path / "out.png")

        assert path.exists()
        with Image.open(path) as image:
            assert image.mode == "RGB"
            assert image.size == (6, 4)
            loaded = np.asarray(image)
        np.testing.assert_array_equal(loaded, pixels)

    def test_accepts_string_path(self, tmp_path):
        from mcray.output.export import save_png

        target = str(tmp_path / "string.png")
        path = save_png(np.full((2, 2, 3), 128, dtype=np.uint8), target)
        assert str(path) == target

    def test_accepts_non_contiguous_views(self, tmp_path):
        from mcray.output.export import save_png

        pixels = np.arange(4 * 4 * 3, dtype=np.uint8).reshape(4, 4, 3)
        view = pixels[:, ::2]
        path = save_png(view, tmp_path / "view.png")
        with Image.open(path) as image:
            np.testing.assert_array_equal(np.asarray(image), view)

    @pytest.mark.parametrize(
        "pixels",
        [
            np.zeros((4, 4), dtype=np.uint8),
            np.zeros((4, 4, 4), dtype=np.uint8),
            np.zeros((4, 4, 3), dtype=np.float32),
        ],
    )
    def test_invalid_pixels_raise(self, pixels, tmp_path):
        from mcray.output.export import save_png

        with pytest.raises(ValueError):
            save_png(pixels, tmp_path / "bad.png")
        assert not (tmp_path / "bad.png").exists()

    def test_unwritable_path_raises(self, tmp_path):
        from mcray.output.export import save_png

        with pytest.raises(RuntimeError):
            save_png(np.zeros((2, 2, 3), dtype=np.uint8), tmp_path / "missing" / "out.png")
