"""Infinite plane primitive.

The plane is the object-space xz-plane (y = 0) and has zero thickness. Its
normal is +y everywhere.

A ray whose direction has no y component is parallel to the plane and
reports no intersection. This includes rays lying inside the plane: a
coplanar ray sees the plane edge-on and is treated as a miss.
"""

from src.raytrace.core.ray import Ray
from src.raytrace.core.tuples import EPSILON, Tuple4, vector
from src.raytrace.geometry.intersection import Intersection, Intersections
from src.raytrace.geometry.shape import Shape, ShapeKind

PLANE_NORMAL = vector(0.0, 1.0, 0.0)


class Plane(Shape):
    """The xz-plane through the object-space origin."""

    kind = ShapeKind.PLANE

    def local_intersect(self, local_ray: Ray) -> Intersections:
        direction_y = local_ray.direction[1]
        if abs(direction_y) < EPSILON:
            return Intersections()
        t = -local_ray.origin[1] / direction_y
        return Intersections(Intersection(float(t), self))

    def local_normal_at(self, local_point: Tuple4) -> Tuple4:
        return PLANE_NORMAL
