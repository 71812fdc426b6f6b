"""World composition, hit resolution, and shading.

The World owns every shape and light of a scene. Tracing a ray through it
follows a fixed pipeline:

1. intersect_world: intersect the ray with every shape and merge the
   results into one list sorted by t.
2. Intersections.hit: pick the nearest intersection in front of the origin.
3. prepare_computations: derive the hit point, eye vector, and normal,
   flipping the normal when the hit is on the inside of a surface.
4. shade_hit: sum the Phong contribution of every light, each attenuated by
   a shadow ray cast from a point nudged off the surface.

color_at runs the whole pipeline for one ray and is the single per-pixel
entry point used by the camera.

Example:
    >>> from src.raytrace.scene.world import color_at, default_world
    >>> from src.raytrace.core.ray import Ray
    >>> from src.raytrace.core.tuples import point, vector
    >>> color_at(default_world(), Ray(point(0, 0, -5), vector(0, 0, 1)))
    array([0.38066119, 0.47582649, 0.2854959 ])
"""

from __future__ import annotations

from dataclasses import dataclass

from src.raytrace.core.ray import Ray, position
from src.raytrace.core.transforms import scaling
from src.raytrace.core.tuples import (
    BLACK,
    EPSILON,
    Color,
    Tuple4,
    add,
    color,
    dot,
    magnitude,
    multiply,
    negate,
    normalize,
    point,
    subtract,
)
from src.raytrace.geometry.intersection import (
    Intersection,
    Intersections,
    combine_intersections,
)
from src.raytrace.geometry.shape import IdAllocator, Shape, intersect, normal_at
from src.raytrace.geometry.sphere import Sphere
from src.raytrace.materials.phong import Material, lighting
from src.raytrace.scene.light import PointLight


class World:
    """A flat collection of shapes and lights.

    Shape order is significant only for tie-breaking: when two shapes are hit
    at exactly the same t, the one added first wins.

    Attributes:
        objects: The shapes in the scene, in insertion order.
        lights: The point lights in the scene, in insertion order.
    """

    def __init__(
        self,
        objects: list[Shape] | None = None,
        lights: list[PointLight] | None = None,
    ) -> None:
        self.objects: list[Shape] = list(objects) if objects else []
        self.lights: list[PointLight] = list(lights) if lights else []

    def add_object(self, shape: Shape) -> int:
        """Add a shape and return its index in the world."""
        self.objects.append(shape)
        return len(self.objects) - 1

    def add_light(self, light: PointLight) -> int:
        """Add a light and return its index in the world."""
        self.lights.append(light)
        return len(self.lights) - 1

    def contains(self, shape: Shape) -> bool:
        return any(obj.id == shape.id for obj in self.objects)

    def __repr__(self) -> str:
        return f"World(objects={len(self.objects)}, lights={len(self.lights)})"


def default_world(allocator: IdAllocator | None = None) -> World:
    """Create the two-sphere, one-light fixture world.

    The outer unit sphere is pastel green with a high diffuse and low
    specular coefficient; the inner sphere is the default material scaled by
    one half. A white light sits above, left, and in front of both.
    """
    outer = Sphere(
        material=Material(color=color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2),
        allocator=allocator,
    )
    inner = Sphere(transform=scaling(0.5, 0.5, 0.5), allocator=allocator)
    light = PointLight(color(1.0, 1.0, 1.0), point(-10.0, 10.0, -10.0))
    return World(objects=[outer, inner], lights=[light])


# =============================================================================
# Intersection
# =============================================================================


def intersect_world(world: World, ray: Ray) -> Intersections:
    """Intersect a ray with every shape in the world.

    Returns:
        All intersections, including those behind the ray origin, sorted by t.
    """
    return combine_intersections(*(intersect(shape, ray) for shape in world.objects))


@dataclass(frozen=True)
class Computations:
    """Precomputed state for shading one intersection.

    Attributes:
        t: The ray parameter of the hit.
        object: The shape that was hit.
        point: The hit point in world space.
        eye: Unit vector from the hit point back toward the ray origin.
        normal: Unit surface normal, flipped to face the eye.
        inside: True if the hit was on the inside of the surface.
        over_point: The hit point nudged along the normal by EPSILON; used
            only as the shadow ray origin.
    """

    t: float
    object: Shape
    point: Tuple4
    eye: Tuple4
    normal: Tuple4
    inside: bool
    over_point: Tuple4


def prepare_computations(intersection: Intersection, ray: Ray) -> Computations:
    """Compute the shading inputs for an intersection.

    Args:
        intersection: The hit to shade.
        ray: The ray that produced the hit.

    Returns:
        The Computations for the hit.
    """
    hit_point = position(ray, intersection.t)
    eye = negate(ray.direction)
    normal = normal_at(intersection.shape, hit_point)

    inside = False
    if dot(normal, eye) < 0.0:
        inside = True
        normal = negate(normal)

    over_point = add(hit_point, multiply(normal, EPSILON))
    return Computations(
        t=intersection.t,
        object=intersection.shape,
        point=hit_point,
        eye=eye,
        normal=normal,
        inside=inside,
        over_point=over_point,
    )


# =============================================================================
# Shading
# =============================================================================


def is_shadowed(world: World, point: Tuple4, light: PointLight) -> bool:
    """Test whether anything blocks the path from point to the light.

    Callers should pass a point already nudged off the surface (the
    over_point) so the surface does not shadow itself.

    Args:
        world: The world to test against.
        point: Origin of the shadow ray.
        light: The light being tested.

    Returns:
        True if a hit lies strictly between point and the light.
    """
    to_light = subtract(light.position, point)
    distance = magnitude(to_light)
    shadow_ray = Ray(origin=point, direction=normalize(to_light))

    hit = intersect_world(world, shadow_ray).hit()
    return hit is not None and hit.t < distance


def shade_hit(world: World, comps: Computations) -> Color:
    """Sum the lighting contribution of every light at a hit."""
    result = BLACK
    for light in world.lights:
        shadowed = is_shadowed(world, comps.over_point, light)
        contribution = lighting(
            comps.object.material, light, comps.point, comps.eye, comps.normal, shadowed
        )
        result = color(*(result + contribution))
    return result


def color_at(world: World, ray: Ray) -> Color:
    """Trace one ray through the world.

    Returns:
        The shaded color of the nearest visible hit, or black if the ray
        escapes the scene.
    """
    hit = intersect_world(world, ray).hit()
    if hit is None:
        return BLACK
    comps = prepare_computations(hit, ray)
    return shade_hit(world, comps)
