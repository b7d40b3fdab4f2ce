"""Image export for rendered pixel buffers.

The renderer already gamma-encodes and quantizes, so export is a straight
copy of the 8-bit buffer into an image container.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from mcray.output.export import save_png
    >>> pixels = camera.render(scene)
    >>> save_png(pixels, "spheres.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def validate_pixels(pixels: npt.NDArray[np.uint8]) -> None:
    """Check that an array is an (H, W, 3) uint8 image.

    Raises:
        ValueError: On any other shape or dtype.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {pixels.dtype}")


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGB buffer as a PNG file.

    Args:
        pixels: Array of shape (height, width, 3), row 0 at the top.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
        RuntimeError: If the file cannot be written.
    """
    validate_pixels(pixels)
    path = Path(filepath)

    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels))
    try:
        pil_image.save(path, format="PNG")
    except OSError as e:
        logger.error("Failed to write image %s: %s", path, e)
        raise RuntimeError(f"Failed to write image to {path}: {e}") from e

    logger.info("Wrote %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path
