#!/usr/bin/env python3
"""Render the default world or a JSON scene file.

This script demonstrates end-to-end rendering: it builds the scene, sets up
the camera, renders with the serial or parallel backend, and writes the
image as PPM or PNG (chosen by the output file extension).

Usage:
    python -m examples.render_default_world [options]

Options:
    --width WIDTH       Image width in pixels (default: 100)
    --height HEIGHT     Image height in pixels (default: 50)
    --fov RADIANS       Field of view in radians (default: pi/3)
    --scene PATH        JSON scene file (default: the two-sphere world)
    --backend NAME      "python" or "taichi" (default: python)
    --arch NAME         Taichi architecture: "gpu" or "cpu" (default: try GPU)
    --output OUTPUT     Output file path, .ppm or .png (default: default_world.ppm)
    --batch-rows ROWS   Rows per progress update (default: 1)
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_default_world --width 200 --height 100 --backend taichi
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default world or a JSON scene file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: 100, or the scene file's)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: 50, or the scene file's)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=math.pi / 3.0,
        help="Field of view in radians for the default world (default: pi/3)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: the two-sphere default world)",
    )
    parser.add_argument(
        "--backend",
        choices=("python", "taichi"),
        default="python",
        help="Render backend (default: python)",
    )
    parser.add_argument(
        "--arch",
        choices=("gpu", "cpu"),
        default=None,
        help="Taichi architecture (default: GPU with CPU fallback)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="default_world.ppm",
        help="Output file path, .ppm or .png (default: default_world.ppm)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=1,
        help="Rows per progress update (default: 1)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def render_scene(
    width: int | None = None,
    height: int | None = None,
    fov: float = math.pi / 3.0,
    scene_path: str | None = None,
    backend: str = "python",
    output_path: str = "default_world.ppm",
    batch_rows: int = 1,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels, or None for the scene default.
        height: Image height in pixels, or None for the scene default.
        fov: Field of view in radians (default world only).
        scene_path: JSON scene file, or None for the default world.
        backend: "python" or "taichi".
        output_path: Output file path (.ppm or .png).
        batch_rows: Number of rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the output extension is not .ppm or .png.
    """
    # Lazy imports to allow Taichi initialization first
    from src.raytrace.core.renderer import Renderer
    from src.raytrace.preview.export import save_png, save_ppm
    from src.raytrace.scene.config import (
        SceneConfig,
        build_camera,
        build_world,
        load_scene_file,
    )
    from src.raytrace.scene.world import default_world

    output_file = Path(output_path)
    suffix = output_file.suffix.lower()
    if suffix not in (".ppm", ".png"):
        raise ValueError(f"Unsupported output format: {suffix or output_path}")

    if scene_path is not None:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        config = load_scene_file(scene_path)
        world = build_world(config)
        camera = build_camera(config, width=width, height=height)
    else:
        config = SceneConfig(camera={"field_of_view": fov})
        world = default_world()
        camera = build_camera(config, width=width, height=height)

    if not quiet:
        print(
            f"Rendering {camera.hsize}x{camera.vsize} with {len(world.objects)} shapes, "
            f"{len(world.lights)} lights ({backend} backend)..."
        )

    renderer = Renderer(camera, backend=backend, batch_rows=batch_rows)
    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    canvas = renderer.render(world, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    if suffix == ".png":
        save_png(canvas, output_file)
    else:
        save_ppm(canvas, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.backend == "taichi":
            from src.raytrace.core.backend import init_backend

            selected = init_backend(args.arch)
            if not args.quiet:
                print(f"Using {selected.upper()} backend")

        render_scene(
            width=args.width,
            height=args.height,
            fov=args.fov,
            scene_path=args.scene,
            backend=args.backend,
            output_path=args.output,
            batch_rows=args.batch_rows,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
