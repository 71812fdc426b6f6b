"""Shape abstraction shared by every primitive.

A shape is defined in its own untransformed object space and placed in the
world by a 4x4 transform. The world-space entry points ``intersect`` and
``normal_at`` convert between the two spaces and delegate to the
primitive-specific ``local_intersect`` and ``local_normal_at``.

Setting a transform inverts it immediately. The inverse and its transpose are
cached on the shape, so a singular transform is rejected at scene
construction time rather than during rendering.

Example:
    >>> from src.raytrace.geometry.sphere import Sphere
    >>> from src.raytrace.geometry.shape import intersect
    >>> from src.raytrace.core.ray import Ray
    >>> from src.raytrace.core.transforms import scaling
    >>> from src.raytrace.core.tuples import point, vector
    >>> sphere = Sphere()
    >>> sphere.transform = scaling(2.0, 2.0, 2.0)
    >>> xs = intersect(sphere, Ray(point(0.0, 0.0, -5.0), vector(0.0, 0.0, 1.0)))
    >>> xs.t_values
    [3.0, 7.0]
"""

from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING

from src.raytrace.core.matrix import IDENTITY, Matrix, inverse, multiply_tuple, transpose
from src.raytrace.core.ray import Ray
from src.raytrace.core.ray import transform as transform_ray
from src.raytrace.core.tuples import Tuple4, as_tuple, normalize
from src.raytrace.materials.phong import Material

if TYPE_CHECKING:
    from src.raytrace.geometry.intersection import Intersections


class ShapeKind(IntEnum):
    """Enumeration of supported primitive types.

    Used by the parallel backend to dispatch intersection and normal
    computation per primitive.
    """

    SPHERE = 0
    PLANE = 1


# =============================================================================
# Identity Allocation
# =============================================================================


class IdAllocator:
    """Thread-safe source of unique, increasing shape ids.

    Ids are unique for the lifetime of the allocator and carry no ordering
    meaning beyond that. Pass a dedicated allocator to shapes to keep id
    sequences isolated, for example in tests.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


# Process-wide allocator used when a shape is created without one
default_allocator = IdAllocator()


# =============================================================================
# Shape Base Class
# =============================================================================


class Shape(ABC):
    """Base class for all primitives.

    Attributes:
        id: Unique identity assigned at creation.
        material: The Phong material of the surface.
        transform: Object-to-world transform (4x4). Assigning a new
            transform recomputes the cached inverse.
    """

    kind: ShapeKind

    def __init__(
        self,
        transform: Matrix | None = None,
        material: Material | None = None,
        allocator: IdAllocator | None = None,
    ) -> None:
        self._id = (allocator or default_allocator).next_id()
        self._material = material if material is not None else Material()
        self._transform = IDENTITY
        self._inverse = IDENTITY
        self._inverse_transpose = IDENTITY
        if transform is not None:
            self.transform = transform

    @property
    def id(self) -> int:
        return self._id

    @property
    def material(self) -> Material:
        return self._material

    @material.setter
    def material(self, value: Material) -> None:
        self._material = value

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, value: Matrix) -> None:
        # Invert first so a singular matrix leaves the shape untouched
        inv = inverse(value)
        self._transform = value
        self._inverse = inv
        self._inverse_transpose = transpose(inv)

    @property
    def inverse_transform(self) -> Matrix:
        return self._inverse

    @property
    def inverse_transpose(self) -> Matrix:
        return self._inverse_transpose

    @abstractmethod
    def local_intersect(self, local_ray: Ray) -> Intersections:
        """Intersect a ray already expressed in object space."""

    @abstractmethod
    def local_normal_at(self, local_point: Tuple4) -> Tuple4:
        """Surface normal at a point already expressed in object space."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, material={self._material!r})"


# =============================================================================
# World-Space Entry Points
# =============================================================================


def intersect(shape: Shape, world_ray: Ray) -> Intersections:
    """Intersect a world-space ray with a shape.

    The ray is moved into object space with the cached inverse transform and
    handed to the shape's local_intersect.

    Args:
        shape: The shape to test.
        world_ray: The ray in world space.

    Returns:
        The intersections, sorted by t. Intersections behind the ray origin
        are included.
    """
    local_ray = transform_ray(world_ray, shape.inverse_transform)
    return shape.local_intersect(local_ray)


def normal_at(shape: Shape, world_point: Tuple4) -> Tuple4:
    """Compute the world-space surface normal at a world-space point.

    The local normal is carried back to world space by the transpose of the
    inverse transform, which stays perpendicular to the surface under
    non-uniform scaling. Any translation leaking into w is discarded before
    normalizing.

    Args:
        shape: The shape the point lies on.
        world_point: A point on the surface in world space.

    Returns:
        The unit normal vector in world space.
    """
    local_point = multiply_tuple(shape.inverse_transform, world_point)
    local_normal = shape.local_normal_at(local_point)
    world_normal = multiply_tuple(shape.inverse_transpose, local_normal)
    world_normal = as_tuple([world_normal[0], world_normal[1], world_normal[2], 0.0])
    return normalize(world_normal)
