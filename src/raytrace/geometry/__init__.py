"""Geometry module for shape primitives and intersection records.

This module provides geometric primitives and intersection algorithms:

Components:
    shape: Abstract Shape with transform caching and id allocation
    sphere: Unit sphere primitive with ray-sphere intersection
    plane: Infinite xz-plane primitive
    intersection: Intersection records, sorted collections, hit selection

Every primitive is intersected in its own object space. The world-space
entry points move the ray into object space with the cached inverse
transform and carry normals back with its transpose:
    xs = intersect(shape, world_ray)
    n = normal_at(shape, world_point)
"""

from .intersection import Intersection, Intersections, combine_intersections
from .plane import Plane
from .shape import IdAllocator, Shape, ShapeKind, default_allocator, intersect, normal_at
from .sphere import Sphere

__all__ = [
    "Shape",
    "ShapeKind",
    "IdAllocator",
    "default_allocator",
    "intersect",
    "normal_at",
    "Sphere",
    "Plane",
    "Intersection",
    "Intersections",
    "combine_intersections",
]
