"""Materials module for surface appearance.

Components:
    phong: Phong material (color, ambient, diffuse, specular, shininess)
        and the lighting equation for one point light

Materials are frozen dataclasses; use Material.with_changes() to derive a
variant from an existing material.
"""

from .phong import Material, lighting

__all__ = [
    "Material",
    "lighting",
]
