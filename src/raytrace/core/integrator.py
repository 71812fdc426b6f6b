"""Parallel Whitted integrator running on Taichi.

This module evaluates exactly the same pipeline as the serial path in
``scene/world.py`` and ``camera/camera.py``, written as Taichi kernels so
every pixel is traced in parallel:

    ray_for_pixel -> nearest hit (t >= 0) -> normal, flipped toward the eye
    -> shadow ray from the over point per light -> Phong lighting, summed

The scene is flattened into structure-of-arrays fields before rendering:
one entry per shape (kind tag, inverse transform, color, Phong coefficients)
and one per light. Ties between shapes hit at the same t go to the shape
added first, matching the stable sort used by the serial path.

World and camera fields are written only by the upload functions and are
read-only while a kernel runs. Each pixel writes only its own buffer cell,
so the kernels need no synchronization.

Taichi must be initialized with ``default_fp=ti.f64`` before this module is
imported (see ``core/backend.py``). Fields are created at import time.

Example:
    >>> from src.raytrace.core.backend import init_backend
    >>> init_backend("cpu")
    >>> from src.raytrace.core.integrator import render_image
    >>> from src.raytrace.scene.world import default_world
    >>> from src.raytrace.camera.camera import Camera
    >>> canvas = render_image(Camera(11, 11, 1.5708), default_world())
"""

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.raytrace.core.tuples import EPSILON
from src.raytrace.geometry.shape import ShapeKind
from src.raytrace.preview.canvas import Canvas

if TYPE_CHECKING:
    from src.raytrace.camera.camera import Camera
    from src.raytrace.scene.world import World

logger = logging.getLogger(__name__)

# Vector and matrix types for kernel signatures
vec3 = ti.types.vector(3, ti.f64)
vec4 = ti.types.vector(4, ti.f64)

# Kind tags as plain ints for comparison inside kernels
_SPHERE = int(ShapeKind.SPHERE)
_PLANE = int(ShapeKind.PLANE)

# =============================================================================
# Scene Storage
# =============================================================================

# Maximum number of shapes and lights supported in the scene
MAX_SHAPES = 1024
MAX_LIGHTS = 64

# Shape storage: Structure of Arrays layout
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_inverse = ti.Matrix.field(4, 4, dtype=ti.f64, shape=MAX_SHAPES)
shape_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
# (ambient, diffuse, specular, shininess)
shape_phong = ti.Vector.field(4, dtype=ti.f64, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())

# Light storage
light_positions = ti.Vector.field(4, dtype=ti.f64, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_world() -> None:
    """Remove every shape and light from the device scene."""
    num_shapes[None] = 0
    num_lights[None] = 0


def upload_world(world: "World") -> None:
    """Copy a world into the scene fields, replacing the previous one.

    Args:
        world: The world to upload. Shapes keep their world order.

    Raises:
        RuntimeError: If the world exceeds MAX_SHAPES or MAX_LIGHTS.
        ValueError: If a shape has a kind the kernels cannot trace.
    """
    n_shapes = len(world.objects)
    n_lights = len(world.lights)
    if n_shapes > MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded: {n_shapes}")
    if n_lights > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded: {n_lights}")

    kinds = np.zeros(MAX_SHAPES, dtype=np.int32)
    inverses = np.zeros((MAX_SHAPES, 4, 4), dtype=np.float64)
    colors = np.zeros((MAX_SHAPES, 3), dtype=np.float64)
    phong = np.zeros((MAX_SHAPES, 4), dtype=np.float64)
    for i, shape in enumerate(world.objects):
        if shape.kind not in (ShapeKind.SPHERE, ShapeKind.PLANE):
            raise ValueError(f"Unsupported shape kind: {shape.kind!r}")
        material = shape.material
        kinds[i] = int(shape.kind)
        inverses[i] = shape.inverse_transform
        colors[i] = material.color
        phong[i] = (material.ambient, material.diffuse, material.specular, material.shininess)

    positions = np.zeros((MAX_LIGHTS, 4), dtype=np.float64)
    intensities = np.zeros((MAX_LIGHTS, 3), dtype=np.float64)
    for i, light in enumerate(world.lights):
        positions[i] = light.position
        intensities[i] = light.intensity

    shape_kinds.from_numpy(kinds)
    shape_inverse.from_numpy(inverses)
    shape_colors.from_numpy(colors)
    shape_phong.from_numpy(phong)
    num_shapes[None] = n_shapes

    light_positions.from_numpy(positions)
    light_intensities.from_numpy(intensities)
    num_lights[None] = n_lights

    logger.debug("Uploaded world: %d shapes, %d lights", n_shapes, n_lights)


def get_shape_count() -> int:
    return int(num_shapes[None])


def get_light_count() -> int:
    return int(num_lights[None])


# =============================================================================
# Camera Storage
# =============================================================================

_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f64, shape=())
_camera_half_width = ti.field(dtype=ti.f64, shape=())
_camera_half_height = ti.field(dtype=ti.f64, shape=())
_camera_pixel_size = ti.field(dtype=ti.f64, shape=())


def upload_camera(camera: "Camera") -> None:
    """Copy the camera state into fields and size the render target to it.

    Args:
        camera: The camera to render through.

    Raises:
        ValueError: If the image is larger than the render target.
    """
    _camera_inverse[None] = ti.Matrix(np.asarray(camera.inverse_transform).tolist())
    _camera_half_width[None] = camera.half_width
    _camera_half_height[None] = camera.half_height
    _camera_pixel_size[None] = camera.pixel_size
    setup_render_target(camera.hsize, camera.vsize)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed (x, y) with (0, 0) at the top-left, like Canvas
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions exceed maximum supported size.
    """
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call upload_camera() first.")


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the active region of the color buffer.

    Returns:
        Unclamped float64 array of shape (width, height, 3), indexed (x, y).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()
    return np.array(full_image[:width, :height, :], dtype=np.float64)


# =============================================================================
# Intersection
# =============================================================================


@ti.func
def _intersect_shape(index: ti.i32, origin: vec4, direction: vec4):
    """Intersect a world-space ray with one shape.

    Args:
        index: The shape index.
        origin: Ray origin (point).
        direction: Ray direction (vector).

    Returns:
        A tuple (count, t0, t1) with t0 <= t1. Only the first count values
        are meaningful.
    """
    inv = shape_inverse[index]
    local_origin = inv @ origin
    local_direction = inv @ direction

    count = 0
    t0 = ti.f64(0.0)
    t1 = ti.f64(0.0)

    kind = shape_kinds[index]
    if kind == _SPHERE:
        sphere_to_ray = local_origin - vec4(0.0, 0.0, 0.0, 1.0)
        a = tm.dot(local_direction, local_direction)
        b = 2.0 * tm.dot(local_direction, sphere_to_ray)
        c = tm.dot(sphere_to_ray, sphere_to_ray) - 1.0
        discriminant = b * b - 4.0 * a * c
        if discriminant >= 0.0:
            sqrt_d = ti.sqrt(discriminant)
            t0 = (-b - sqrt_d) / (2.0 * a)
            t1 = (-b + sqrt_d) / (2.0 * a)
            count = 2
    elif kind == _PLANE:
        if ti.abs(local_direction[1]) >= EPSILON:
            t0 = -local_origin[1] / local_direction[1]
            t1 = t0
            count = 1

    return count, t0, t1


@ti.func
def _hit(origin: vec4, direction: vec4):
    """Find the nearest intersection with t >= 0.

    Returns:
        A tuple (index, t). index is -1 when nothing is hit.
    """
    best_index = -1
    best_t = ti.f64(0.0)

    for i in range(num_shapes[None]):
        count, t0, t1 = _intersect_shape(i, origin, direction)
        if count > 0:
            t = t0
            if t < 0.0 and count > 1:
                t = t1
            # Strict comparison keeps the earlier shape on ties
            if t >= 0.0 and (best_index < 0 or t < best_t):
                best_index = i
                best_t = t

    return best_index, best_t


@ti.func
def _normal_at(index: ti.i32, world_point: vec4) -> vec4:
    """World-space unit normal of a shape at a world-space point."""
    inv = shape_inverse[index]
    local_point = inv @ world_point

    local_normal = vec4(0.0, 1.0, 0.0, 0.0)
    if shape_kinds[index] == _SPHERE:
        local_normal = local_point - vec4(0.0, 0.0, 0.0, 1.0)

    world_normal = inv.transpose() @ local_normal
    world_normal[3] = 0.0
    return tm.normalize(world_normal)


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _is_shadowed(point: vec4, light_index: ti.i32) -> ti.i32:
    """1 if a shape lies strictly between point and the light, else 0."""
    to_light = light_positions[light_index] - point
    distance = to_light.norm()
    index, t = _hit(point, to_light / distance)

    shadowed = 0
    if index >= 0 and t < distance:
        shadowed = 1
    return shadowed


@ti.func
def _lighting(
    index: ti.i32,
    light_index: ti.i32,
    point: vec4,
    eye: vec4,
    normal: vec4,
    in_shadow: ti.i32,
) -> vec3:
    """Phong lighting of one shape by one light (unclamped)."""
    phong = shape_phong[index]
    intensity = light_intensities[light_index]
    effective_color = shape_colors[index] * intensity
    light_vector = tm.normalize(light_positions[light_index] - point)

    result = effective_color * phong[0]

    light_dot_normal = tm.dot(light_vector, normal)
    if in_shadow == 0 and light_dot_normal >= 0.0:
        result += effective_color * (phong[1] * light_dot_normal)

        reflect_vector = tm.reflect(-light_vector, normal)
        reflect_dot_eye = tm.dot(reflect_vector, eye)
        if reflect_dot_eye > 0.0:
            result += intensity * (phong[2] * reflect_dot_eye ** phong[3])

    return result


@ti.func
def _color_at(origin: vec4, direction: vec4) -> vec3:
    """Trace one ray: black on a miss, summed Phong lighting on a hit."""
    result = vec3(0.0, 0.0, 0.0)

    index, t = _hit(origin, direction)
    if index >= 0:
        point = origin + direction * t
        eye = -direction
        normal = _normal_at(index, point)
        if tm.dot(normal, eye) < 0.0:
            normal = -normal
        over_point = point + normal * EPSILON

        for light_index in range(num_lights[None]):
            shadowed = _is_shadowed(over_point, light_index)
            result += _lighting(index, light_index, point, eye, normal, shadowed)

    return result


@ti.func
def _ray_for_pixel(px: ti.i32, py: ti.i32):
    """World-space ray through the center of pixel (px, py).

    Returns:
        A tuple (origin, direction) with a normalized direction.
    """
    pixel_size = _camera_pixel_size[None]
    world_x = _camera_half_width[None] - (ti.cast(px, ti.f64) + 0.5) * pixel_size
    world_y = _camera_half_height[None] - (ti.cast(py, ti.f64) + 0.5) * pixel_size

    inv = _camera_inverse[None]
    pixel = inv @ vec4(world_x, world_y, -1.0, 1.0)
    origin = inv @ vec4(0.0, 0.0, 0.0, 1.0)
    direction = tm.normalize(pixel - origin)
    return origin, direction


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows_kernel(width: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Trace every pixel of rows [row_start, row_end) into the color buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        origin, direction = _ray_for_pixel(i, j)
        _color_buffer[i, j] = _color_at(origin, direction)


@ti.kernel
def _render_single_pixel(px: ti.i32, py: ti.i32) -> vec3:
    """Trace a single pixel without touching the color buffer."""
    origin, direction = _ray_for_pixel(px, py)
    return _color_at(origin, direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Trace rows [row_start, row_end) of the uploaded scene.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image height {height}")
    if row_start < row_end:
        _render_rows_kernel(width, row_start, row_end)


def render_pixel(px: int, py: int) -> tuple[float, float, float]:
    """Trace a single pixel of the uploaded scene.

    This is a Python-callable function for testing. For production
    rendering, use render_image() which processes all pixels in parallel.

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(px, py)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(camera: "Camera", world: "World") -> Canvas:
    """Upload a scene, trace every pixel in parallel, and return the image.

    Args:
        camera: The camera to render through.
        world: The scene. Must not be modified during the render.

    Returns:
        A camera.hsize x camera.vsize canvas of unclamped colors.
    """
    upload_world(world)
    upload_camera(camera)
    render_rows(0, camera.vsize)
    return Canvas.from_array(get_image_numpy())
