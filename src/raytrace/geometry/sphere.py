"""Unit sphere primitive.

The sphere is centered at the object-space origin with radius 1. Position
and size in the world come entirely from the shape transform.

The ray-sphere intersection solves

    |origin + t * direction - center|^2 = 1

which expands to a*t^2 + b*t + c = 0 with

    a = dot(direction, direction)
    b = 2 * dot(direction, origin - center)
    c = dot(origin - center, origin - center) - 1

Both roots are always reported when the discriminant is non-negative, even
when they coincide (tangent ray) or lie behind the ray origin; filtering
happens later, at hit selection.

Example:
    >>> from src.raytrace.geometry.sphere import Sphere
    >>> from src.raytrace.core.ray import Ray
    >>> from src.raytrace.core.tuples import point, vector
    >>> Sphere().local_intersect(Ray(point(0, 0, -5), vector(0, 0, 1))).t_values
    [4.0, 6.0]
"""

import math

from src.raytrace.core.ray import Ray
from src.raytrace.core.tuples import ORIGIN, Tuple4, dot, subtract
from src.raytrace.geometry.intersection import Intersection, Intersections
from src.raytrace.geometry.shape import Shape, ShapeKind


class Sphere(Shape):
    """A unit sphere centered at the object-space origin."""

    kind = ShapeKind.SPHERE

    def local_intersect(self, local_ray: Ray) -> Intersections:
        """Solve the ray-sphere quadratic in object space.

        Args:
            local_ray: The ray in object space.

        Returns:
            Two intersections (t1 <= t2), or none when the discriminant is
            negative.
        """
        sphere_to_ray = subtract(local_ray.origin, ORIGIN)
        a = dot(local_ray.direction, local_ray.direction)
        b = 2.0 * dot(local_ray.direction, sphere_to_ray)
        c = dot(sphere_to_ray, sphere_to_ray) - 1.0

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return Intersections()

        sqrt_d = math.sqrt(discriminant)
        t1 = (-b - sqrt_d) / (2.0 * a)
        t2 = (-b + sqrt_d) / (2.0 * a)
        return Intersections(Intersection(t1, self), Intersection(t2, self))

    def local_normal_at(self, local_point: Tuple4) -> Tuple4:
        # The outward normal of a unit sphere is the point's offset from the center
        return subtract(local_point, ORIGIN)
