"""Output module for writing rendered images."""

from .export import save_png, validate_pixels

__all__ = ["save_png", "validate_pixels"]
