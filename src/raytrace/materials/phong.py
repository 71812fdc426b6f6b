"""Phong material and the direct-lighting equation.

This module implements the Phong reflection model evaluated for a single
point light. The reflected color is the sum of three terms:

    ambient  = effective_color * ambient
    diffuse  = effective_color * diffuse * dot(light_vector, normal)
    specular = intensity * specular * dot(reflect_vector, eye)^shininess

where effective_color = surface color * light intensity (component-wise).
Diffuse and specular vanish when the light is behind the surface or the
point is in shadow; specular also vanishes when the light reflects away from
the eye. The sum is returned unclamped; clamping to the displayable range
happens only when an image is exported.

Example:
    >>> from src.raytrace.materials.phong import Material, lighting
    >>> from src.raytrace.scene.light import PointLight
    >>> from src.raytrace.core.tuples import color, point, vector
    >>> light = PointLight(color(1, 1, 1), point(0, 0, -10))
    >>> lighting(Material(), light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1))
    array([1.9, 1.9, 1.9])
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from src.raytrace.core.tuples import (
    BLACK,
    WHITE,
    Color,
    Tuple4,
    color,
    dot,
    hadamard,
    negate,
    normalize,
    reflect,
    subtract,
)

if TYPE_CHECKING:
    from src.raytrace.scene.light import PointLight


@dataclass(frozen=True)
class Material:
    """Phong surface properties.

    Attributes:
        color: Surface color (RGB). Defaults to white.
        ambient: Fraction of the light reflected regardless of geometry.
        diffuse: Strength of the matte (Lambertian) term.
        specular: Strength of the highlight term.
        shininess: Highlight exponent; larger values give a smaller,
            tighter highlight.
    """

    color: Color = field(default_factory=lambda: WHITE)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", color(*self.color))
        for name in ("ambient", "diffuse", "specular", "shininess"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"Material {name} = {value} must be non-negative")

    def with_changes(self, **changes: Any) -> Material:
        """Return a copy of the material with some attributes replaced."""
        return dataclasses.replace(self, **changes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return (
            tuple(self.color) == tuple(other.color)
            and self.ambient == other.ambient
            and self.diffuse == other.diffuse
            and self.specular == other.specular
            and self.shininess == other.shininess
        )

    def __hash__(self) -> int:
        return hash(
            (tuple(self.color), self.ambient, self.diffuse, self.specular, self.shininess)
        )


def lighting(
    material: Material,
    light: PointLight,
    point: Tuple4,
    eye_vector: Tuple4,
    normal: Tuple4,
    in_shadow: bool = False,
) -> Color:
    """Shade a surface point lit by one point light.

    Args:
        material: The surface material.
        light: The point light.
        point: The surface point being shaded (world space).
        eye_vector: Unit vector from the point toward the eye.
        normal: Unit surface normal, facing the eye.
        in_shadow: Whether the light is blocked; only ambient remains if so.

    Returns:
        The unclamped reflected color.
    """
    effective_color = hadamard(material.color, light.intensity)
    light_vector = normalize(subtract(light.position, point))
    ambient = effective_color * material.ambient

    light_dot_normal = dot(light_vector, normal)
    if in_shadow or light_dot_normal < 0.0:
        # Light is blocked or behind the surface
        return color(*ambient)

    diffuse = effective_color * (material.diffuse * light_dot_normal)

    reflect_vector = reflect(negate(light_vector), normal)
    reflect_dot_eye = dot(reflect_vector, eye_vector)
    if reflect_dot_eye <= 0.0:
        specular = BLACK
    else:
        factor = math.pow(reflect_dot_eye, material.shininess)
        specular = light.intensity * (material.specular * factor)

    return color(*(ambient + (diffuse + specular)))
