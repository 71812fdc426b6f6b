"""Image export utilities for rendered canvases.

This module turns a Canvas of unclamped float RGB values into files on disk.

Supported formats:
    - PPM (plain-text P3, 8-bit channels)
    - PNG (8-bit via Pillow)

Both formats quantize a channel c to clamp(ceil(255 * c), 0, 255), so a
canvas exported as PPM and PNG carries identical pixel values.

Example:
    >>> from src.raytrace.preview.export import canvas_to_ppm
    >>> from src.raytrace.preview.canvas import Canvas
    >>> canvas_to_ppm(Canvas(5, 3)).splitlines()[:3]
    ['P3', '5 3', '255']
"""

from __future__ import annotations

import logging
import os
import textwrap

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.raytrace.preview.canvas import Canvas

logger = logging.getLogger(__name__)

# PPM lines must stay strictly shorter than this many characters
PPM_MAX_LINE_LENGTH = 70

# Maximum channel value written to 8-bit outputs
MAX_COLOR_VALUE = 255


# =============================================================================
# Quantization
# =============================================================================


def image_to_uint8(
    pixels: npt.NDArray[np.floating[npt.NBitBase]],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Quantize float channels to 8-bit values.

    Args:
        pixels: Float array of any shape; values are clamped to [0, 1].
        gamma: Gamma correction value. Default 1.0 (linear), which leaves
            values unchanged before quantization.

    Returns:
        Array of the same shape with dtype uint8.
    """
    image = np.clip(np.asarray(pixels, dtype=np.float64), 0.0, 1.0)
    if gamma != 1.0:
        image = np.power(image, 1.0 / gamma)
    scaled = np.ceil(image * MAX_COLOR_VALUE)
    return np.clip(scaled, 0, MAX_COLOR_VALUE).astype(np.uint8)


# =============================================================================
# PPM
# =============================================================================


def canvas_to_ppm(canvas: Canvas) -> str:
    """Serialize a canvas as plain-text PPM (P3).

    The output is a three-line header (``P3``, ``<width> <height>``,
    ``255``) followed by one block per pixel row. Each block lists the
    quantized channel triples of the row separated by single spaces, broken
    at the last space that keeps a line shorter than 70 characters, so a
    line never reaches the limit. Every row ends with a newline, so the
    file always ends with one.

    Args:
        canvas: The canvas to serialize.

    Returns:
        The PPM document as a string.
    """
    header = f"P3\n{canvas.width} {canvas.height}\n{MAX_COLOR_VALUE}\n"

    # (width, height, 3) -> rows of channel values
    quantized = image_to_uint8(canvas.pixels)
    rows = []
    for y in range(canvas.height):
        values = " ".join(str(int(v)) for v in quantized[:, y, :].ravel())
        lines = textwrap.wrap(values, width=PPM_MAX_LINE_LENGTH - 1, break_on_hyphens=False)
        rows.append("\n".join(lines) + "\n")

    return header + "".join(rows)


def save_ppm(canvas: Canvas, filepath: str | os.PathLike[str]) -> None:
    """Write a canvas to a PPM file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .ppm).
    """
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        f.write(canvas_to_ppm(canvas))
    logger.info("Wrote %dx%d PPM to %s", canvas.width, canvas.height, filepath)


# =============================================================================
# PNG
# =============================================================================


def save_png(
    canvas: Canvas,
    filepath: str | os.PathLike[str],
    *,
    gamma: float = 1.0,
) -> None:
    """Save a canvas as an 8-bit PNG file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value. Default 1.0 keeps the same values the
            PPM writer produces; use 2.2 for sRGB display.
    """
    # Pillow expects (height, width, 3)
    image = np.transpose(canvas.pixels, (1, 0, 2))
    image_uint8 = image_to_uint8(image, gamma=gamma)

    pil_image = PILImage.fromarray(np.ascontiguousarray(image_uint8))
    pil_image.save(filepath)
    logger.info("Wrote %dx%d PNG to %s", canvas.width, canvas.height, filepath)


# =============================================================================
# Comparison
# =============================================================================


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
