"""Preview module for image buffers and output.

Components:
    canvas: In-memory RGB float image addressed by (x, y)
    export: PPM and PNG writers, 8-bit quantization, image comparison

Example:
    >>> from src.raytrace.preview import Canvas, save_ppm
    >>> canvas = Canvas(64, 48)
    >>> save_ppm(canvas, "output.ppm")
"""

from src.raytrace.preview.canvas import Canvas
from src.raytrace.preview.export import (
    canvas_to_ppm,
    compute_rmse,
    image_to_uint8,
    save_png,
    save_ppm,
)

__all__ = [
    "Canvas",
    "canvas_to_ppm",
    "save_ppm",
    "save_png",
    "image_to_uint8",
    "compute_rmse",
]
