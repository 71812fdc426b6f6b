"""Row-by-row renderer with progress reporting.

This module wraps the two render paths behind one interface:

- "python": the serial pipeline in ``camera/camera.py`` (NumPy, one pixel
  at a time, bit-for-bit deterministic)
- "taichi": the parallel kernels in ``core/integrator.py``

Both trace the same rays with the same shading rules, so their images agree
to floating-point rounding. Rendering proceeds in bands of rows, which
allows progress callbacks for long renders and a generator variant for
callers that want to interleave other work.

Example:
    >>> from src.raytrace.core.renderer import Renderer
    >>> from src.raytrace.camera.camera import Camera
    >>> from src.raytrace.scene.world import default_world
    >>>
    >>> renderer = Renderer(Camera(100, 50, 1.0472))
    >>> def progress(rows_done, total_rows):
    ...     print(f"Progress: {rows_done}/{total_rows} rows")
    >>> canvas = renderer.render(default_world(), callback=progress)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator

from src.raytrace.camera.camera import Camera, render_row
from src.raytrace.preview.canvas import Canvas
from src.raytrace.scene.world import World

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

BACKENDS = ("python", "taichi")


class Renderer:
    """Render a world through a camera with either backend.

    The renderer keeps the most recent image, so a generator-driven render
    can be inspected while it runs. With the taichi backend the canvas is
    filled from the device buffer once the last band is traced.

    Attributes:
        camera: The camera to render through.
        backend: "python" or "taichi".
        batch_rows: Number of rows traced between progress reports.
    """

    def __init__(self, camera: Camera, backend: str = "python", batch_rows: int = 1) -> None:
        """Initialize the renderer.

        Args:
            camera: The camera to render through.
            backend: "python" (serial) or "taichi" (parallel). The taichi
                backend requires Taichi to be initialized first.
            batch_rows: Rows per progress report (at least 1).

        Raises:
            ValueError: If backend or batch_rows is invalid.
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {backend} (expected one of {BACKENDS})")
        if batch_rows < 1:
            raise ValueError(f"batch_rows must be at least 1, got {batch_rows}")

        self._camera = camera
        self._backend = backend
        self._batch_rows = batch_rows
        self._canvas: Canvas | None = None

    @property
    def camera(self) -> Camera:
        return self._camera

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def batch_rows(self) -> int:
        return self._batch_rows

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._camera.hsize

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._camera.vsize

    @property
    def canvas(self) -> Canvas | None:
        """The image of the current or most recent render, if any."""
        return self._canvas

    def render(self, world: World, callback: ProgressCallback | None = None) -> Canvas:
        """Render the world into a new canvas.

        Args:
            world: The scene. Must not be modified during the render.
            callback: Optional callback function called after each band of
                rows. Receives (rows_done, total_rows).

        Returns:
            A width x height canvas of unclamped colors.
        """
        start_time = time.perf_counter()
        for rows_done, total_rows in self.render_rows(world):
            if callback is not None:
                callback(rows_done, total_rows)

        logger.info(
            "Rendered %dx%d with %s backend in %.2fs",
            self.width,
            self.height,
            self._backend,
            time.perf_counter() - start_time,
        )
        if self._canvas is None:
            raise RuntimeError("Render finished without producing an image")
        return self._canvas

    def render_rows(self, world: World) -> Generator[tuple[int, int], None, None]:
        """Render the world, yielding progress after each band of rows.

        This is a generator-based alternative to render() with callbacks.
        The finished image is available from the canvas property once the
        generator is exhausted.

        Args:
            world: The scene. Must not be modified during the render.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        total_rows = self.height
        self._canvas = Canvas(self.width, total_rows)

        if self._backend == "taichi":
            yield from self._render_taichi(world, total_rows)
            return

        for row_start in range(0, total_rows, self._batch_rows):
            row_end = min(row_start + self._batch_rows, total_rows)
            for y in range(row_start, row_end):
                render_row(self._camera, world, self._canvas, y)
            yield (row_end, total_rows)

    def _render_taichi(self, world: World, total_rows: int) -> Generator[tuple[int, int], None, None]:
        # Imported here so the python backend never creates Taichi fields
        from src.raytrace.core import integrator

        integrator.upload_world(world)
        integrator.upload_camera(self._camera)

        for row_start in range(0, total_rows, self._batch_rows):
            row_end = min(row_start + self._batch_rows, total_rows)
            integrator.render_rows(row_start, row_end)
            if row_end == total_rows:
                self._canvas = Canvas.from_array(integrator.get_image_numpy())
            yield (row_end, total_rows)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"backend={self._backend!r})"
        )
