"""Ray data structure.

A ray is an origin point and a direction vector. Rays are immutable; moving
a ray into another coordinate space produces a new ray.

Example:
    >>> from src.raytrace.core.ray import Ray, position
    >>> from src.raytrace.core.tuples import point, vector
    >>> ray = Ray(origin=point(2.0, 3.0, 4.0), direction=vector(1.0, 0.0, 0.0))
    >>> p = position(ray, 2.5)  # point(4.5, 3.0, 4.0)
"""

from dataclasses import dataclass

from src.raytrace.core.matrix import Matrix, multiply_tuple
from src.raytrace.core.tuples import Tuple4, add, multiply


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (w=1).
        direction: The direction vector of the ray (w=0). Not required to be
            normalized: rays transformed into object space are generally not.
    """

    origin: Tuple4
    direction: Tuple4


def position(ray: Ray, t: float) -> Tuple4:
    """Compute the point at parameter t along the ray.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Negative values lie behind the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return add(ray.origin, multiply(ray.direction, t))


def transform(ray: Ray, m: Matrix) -> Ray:
    """Apply a 4x4 transform to both the origin and the direction."""
    return Ray(origin=multiply_tuple(m, ray.origin), direction=multiply_tuple(m, ray.direction))
