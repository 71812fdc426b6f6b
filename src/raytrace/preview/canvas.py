"""In-memory RGB image buffer.

A Canvas is the boundary artifact produced by rendering: a width x height
grid of unclamped float RGB values addressed by (x, y), with x growing to the
right and y growing downward from the top-left corner. Clamping and
quantization happen only when the canvas is exported.

The pixels are stored in one NumPy array of shape (width, height, 3), the
same (x, y) layout the parallel backend writes, so whole images move between
the two without reindexing.

Example:
    >>> from src.raytrace.preview.canvas import Canvas
    >>> from src.raytrace.core.tuples import color
    >>> canvas = Canvas(10, 20)
    >>> canvas.write_pixel(2, 3, color(1.0, 0.0, 0.0))
    >>> canvas.pixel_at(2, 3)
    array([1., 0., 0.])
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from src.raytrace.core.tuples import Color, color


class Canvas:
    """A grid of RGB float pixels, initialised to black.

    Attributes:
        width: Number of columns.
        height: Number of rows.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._pixels = np.zeros((width, height, 3), dtype=np.float64)

    @classmethod
    def from_array(cls, pixels: npt.ArrayLike) -> Canvas:
        """Create a canvas from an array of shape (width, height, 3).

        Raises:
            ValueError: If the array does not have three color channels.
        """
        arr = np.asarray(pixels, dtype=np.float64)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (width, height, 3), got {arr.shape}")
        canvas = cls(arr.shape[0], arr.shape[1])
        canvas._pixels[...] = arr
        return canvas

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixels(self) -> npt.NDArray[np.float64]:
        """A read-only view of the pixel array, shape (width, height, 3)."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self._width}x{self._height} canvas"
            )

    def write_pixel(self, x: int, y: int, value: Color) -> None:
        self._check_bounds(x, y)
        self._pixels[x, y] = value

    def write_row(self, y: int, values: npt.ArrayLike) -> None:
        """Overwrite row y with an array of shape (width, 3)."""
        self._check_bounds(0, y)
        self._pixels[:, y] = values

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        return color(*self._pixels[x, y])

    def __repr__(self) -> str:
        return f"Canvas(width={self._width}, height={self._height})"
