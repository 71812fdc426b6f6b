"""Builders for 4x4 affine transform matrices.

All functions return fresh read-only matrices. Callers compose transforms
with ``multiply`` (rightmost applied first) or with ``chain``, which takes
transforms in the order they should be applied.

Example:
    >>> import math
    >>> from src.raytrace.core.transforms import chain, rotation_x, scaling, translation
    >>> t = chain(rotation_x(math.pi / 2), scaling(5, 5, 5), translation(10, 5, 7))
"""

import math

from src.raytrace.core.matrix import IDENTITY, Matrix, matrix, multiply
from src.raytrace.core.tuples import Tuple4, cross, normalize, subtract


def translation(x: float, y: float, z: float) -> Matrix:
    return matrix(
        [1.0, 0.0, 0.0, x],
        [0.0, 1.0, 0.0, y],
        [0.0, 0.0, 1.0, z],
        [0.0, 0.0, 0.0, 1.0],
    )


def scaling(x: float, y: float, z: float) -> Matrix:
    return matrix(
        [x, 0.0, 0.0, 0.0],
        [0.0, y, 0.0, 0.0],
        [0.0, 0.0, z, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )


def rotation_x(radians: float) -> Matrix:
    """Rotate about the x axis (right-handed)."""
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)
    return matrix(
        [1.0, 0.0, 0.0, 0.0],
        [0.0, cos_r, -sin_r, 0.0],
        [0.0, sin_r, cos_r, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )


def rotation_y(radians: float) -> Matrix:
    """Rotate about the y axis (right-handed)."""
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)
    return matrix(
        [cos_r, 0.0, sin_r, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-sin_r, 0.0, cos_r, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )


def rotation_z(radians: float) -> Matrix:
    """Rotate about the z axis (right-handed)."""
    cos_r = math.cos(radians)
    sin_r = math.sin(radians)
    return matrix(
        [cos_r, -sin_r, 0.0, 0.0],
        [sin_r, cos_r, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Shear each axis in proportion to the other two.

    Args:
        xy: Moves x in proportion to y.
        xz: Moves x in proportion to z.
        yx: Moves y in proportion to x.
        yz: Moves y in proportion to z.
        zx: Moves z in proportion to x.
        zy: Moves z in proportion to y.
    """
    return matrix(
        [1.0, xy, xz, 0.0],
        [yx, 1.0, yz, 0.0],
        [zx, zy, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )


def chain(*transforms: Matrix) -> Matrix:
    """Compose transforms listed in the order they are applied.

    ``chain(a, b, c)`` equals ``c @ b @ a``: a is applied to a tuple first.
    With no arguments the identity is returned.
    """
    result = IDENTITY
    for transform in transforms:
        result = multiply(transform, result)
    return result


def view_transform(from_point: Tuple4, to_point: Tuple4, up: Tuple4) -> Matrix:
    """Build the world-to-camera transform for an eye looking at a point.

    The resulting space has the eye at the origin looking down -z with up
    along +y.

    Args:
        from_point: The eye position (point).
        to_point: The point being looked at.
        up: Approximate up direction (vector); need not be normalized or
            exactly perpendicular to the view direction.

    Returns:
        orientation * translation(-from).

    Raises:
        ValueError: If from_point equals to_point or up is parallel to the
            view direction.
    """
    forward = normalize(subtract(to_point, from_point))
    left = normalize(cross(forward, normalize(up)))
    true_up = cross(left, forward)
    orientation = matrix(
        [left[0], left[1], left[2], 0.0],
        [true_up[0], true_up[1], true_up[2], 0.0],
        [-forward[0], -forward[1], -forward[2], 0.0],
        [0.0, 0.0, 0.0, 1.0],
    )
    return multiply(
        orientation, translation(-from_point[0], -from_point[1], -from_point[2])
    )
