"""Perspective camera and the serial render loop.

The camera sits at the origin of its own space looking toward -z, with a
virtual image plane exactly one unit in front of it. The field of view spans
the longer image dimension:

- hsize >= vsize: half_width = tan(fov / 2), half_height = half_width / aspect
- hsize <  vsize: half_height = tan(fov / 2), half_width = half_height * aspect

Pixels are square, with side pixel_size = 2 * half_width / hsize. Pixel
(0, 0) is the top-left corner of the image; rays pass through pixel centers.

The camera transform is a view transform (world to camera). Its inverse is
cached when the transform is set and carries camera-space points back into
the world for ray generation.

Example:
    >>> import math
    >>> from src.raytrace.camera.camera import Camera, render
    >>> from src.raytrace.core.transforms import view_transform
    >>> from src.raytrace.core.tuples import point, vector
    >>> from src.raytrace.scene.world import default_world
    >>>
    >>> camera = Camera(11, 11, math.pi / 2)
    >>> camera.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    >>> image = render(camera, default_world())
    >>> image.pixel_at(5, 5)
    array([0.38066119, 0.47582649, 0.2854959 ])
"""

from __future__ import annotations

import math

from src.raytrace.core.matrix import IDENTITY, Matrix, inverse, multiply_tuple
from src.raytrace.core.ray import Ray
from src.raytrace.core.tuples import ORIGIN, normalize, point, subtract
from src.raytrace.preview.canvas import Canvas
from src.raytrace.scene.world import World, color_at


class Camera:
    """A pinhole camera mapping a pixel grid onto the scene.

    Attributes:
        hsize: Horizontal size of the image in pixels.
        vsize: Vertical size of the image in pixels.
        field_of_view: Angle of view across the longer image dimension, in
            radians.
        half_width: Half the width of the image plane in camera space.
        half_height: Half the height of the image plane in camera space.
        pixel_size: Side of one pixel on the image plane.
        transform: World-to-camera transform. Identity by default.
    """

    def __init__(self, hsize: int, vsize: int, field_of_view: float) -> None:
        """Initialize the camera.

        Args:
            hsize: Image width in pixels.
            vsize: Image height in pixels.
            field_of_view: Field of view in radians, in (0, pi).

        Raises:
            ValueError: If a dimension is not positive or the field of view is
                outside (0, pi).
        """
        if hsize <= 0 or vsize <= 0:
            raise ValueError(f"Camera dimensions must be positive, got {hsize}x{vsize}")
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {field_of_view}")

        self._hsize = hsize
        self._vsize = vsize
        self._field_of_view = field_of_view

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1.0:
            self._half_width = half_view
            self._half_height = half_view / aspect
        else:
            self._half_width = half_view * aspect
            self._half_height = half_view
        self._pixel_size = (self._half_width * 2.0) / hsize

        self._transform = IDENTITY
        self._inverse = IDENTITY

    @property
    def hsize(self) -> int:
        return self._hsize

    @property
    def vsize(self) -> int:
        return self._vsize

    @property
    def field_of_view(self) -> float:
        return self._field_of_view

    @property
    def half_width(self) -> float:
        return self._half_width

    @property
    def half_height(self) -> float:
        return self._half_height

    @property
    def pixel_size(self) -> float:
        return self._pixel_size

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, value: Matrix) -> None:
        inv = inverse(value)
        self._transform = value
        self._inverse = inv

    @property
    def inverse_transform(self) -> Matrix:
        return self._inverse

    def __repr__(self) -> str:
        return (
            f"Camera(hsize={self._hsize}, vsize={self._vsize}, "
            f"field_of_view={self._field_of_view})"
        )


def ray_for_pixel(camera: Camera, px: int, py: int) -> Ray:
    """Build the world-space ray through the center of a pixel.

    Args:
        camera: The camera.
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).

    Returns:
        A ray from the camera position with a normalized direction.
    """
    # Offset from the edge of the canvas to the pixel center
    x_offset = (px + 0.5) * camera.pixel_size
    y_offset = (py + 0.5) * camera.pixel_size

    # Camera looks toward -z, so +x is to the left
    world_x = camera.half_width - x_offset
    world_y = camera.half_height - y_offset

    inv = camera.inverse_transform
    pixel = multiply_tuple(inv, point(world_x, world_y, -1.0))
    origin = multiply_tuple(inv, ORIGIN)
    direction = normalize(subtract(pixel, origin))
    return Ray(origin=origin, direction=direction)


def render_row(camera: Camera, world: World, canvas: Canvas, y: int) -> None:
    """Trace every pixel of row y into the canvas."""
    row = [color_at(world, ray_for_pixel(camera, x, y)) for x in range(camera.hsize)]
    canvas.write_row(y, row)


def render(camera: Camera, world: World) -> Canvas:
    """Render the world through the camera, one pixel at a time.

    Rows are traced top to bottom and pixels left to right. Every pixel is
    written exactly once, and the result depends only on the camera and the
    world.

    Args:
        camera: The camera to render through.
        world: The scene. Must not be modified during the render.

    Returns:
        A camera.hsize x camera.vsize canvas of unclamped colors.
    """
    image = Canvas(camera.hsize, camera.vsize)
    for y in range(camera.vsize):
        render_row(camera, world, image, y)
    return image
