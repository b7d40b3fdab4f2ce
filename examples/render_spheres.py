#!/usr/bin/env python3
"""Render the material showcase scene.

This script renders a diffuse, a glass and a metal sphere resting on a large
ground sphere, lit only by the sky, and writes the result as a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width divided by height (default: 1.7778)
    --samples SAMPLES       Number of samples per pixel (default: 100)
    --max-depth DEPTH       Maximum ray bounces (default: 50)
    --seed SEED             Sampler seed (default: fresh entropy)
    --output OUTPUT         Output file path (default: spheres.png)
    --arch {cpu,gpu}        Taichi backend (default: gpu, falls back to cpu)
    --quiet                 Suppress progress output

Example:
    python -m examples.render_spheres --width 200 --samples 20 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the material showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Width divided by height (default: 1.7778)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum ray bounces (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Sampler seed (default: fresh entropy)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 400,
    aspect_ratio: float = 16.0 / 9.0,
    num_samples: int = 100,
    max_depth: int = 50,
    seed: int | None = None,
    output_path: str = "spheres.png",
    quiet: bool = False,
) -> Path:
    """Render the material showcase and save it to file.

    Args:
        width: Image width in pixels.
        aspect_ratio: Width divided by height.
        num_samples: Number of samples per pixel.
        max_depth: Maximum ray bounces.
        seed: Sampler seed, or None for fresh entropy.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from mcray.camera.camera import Camera
    from mcray.core.sampler import seed_sampler
    from mcray.output.export import save_png
    from mcray.scene.presets import ShowcaseParams, create_material_showcase_scene

    seed_sampler(seed)

    params = ShowcaseParams(
        image_width=width,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
    )
    scene, config = create_material_showcase_scene(params)
    camera = Camera(replace(config, aspect_ratio=aspect_ratio))

    if not quiet:
        print(
            f"Rendering {camera.image_width}x{camera.image_height}, "
            f"{num_samples} samples per pixel, {scene.get_sphere_count()} spheres..."
        )

    start_time = time.time()
    pixels = camera.render(scene)

    output_file = save_png(pixels, output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if not args.quiet:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Taichi falls back to the CPU when no GPU backend is available
    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)
    if not args.quiet:
        print(f"Requested {args.arch.upper()} backend")

    try:
        render_spheres(
            width=args.width,
            aspect_ratio=args.aspect_ratio,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
