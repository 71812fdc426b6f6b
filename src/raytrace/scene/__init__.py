"""Scene module for lights and world composition.

This module handles scene representation and ray-scene queries:

Components:
    light: Point light source
    world: World container, default fixture world, and the shading
        pipeline (intersect_world, prepare_computations, is_shadowed,
        shade_hit, color_at)
    config: JSON scene files and builders for worlds and cameras
"""

from .light import PointLight
from .world import (
    Computations,
    World,
    color_at,
    default_world,
    intersect_world,
    is_shadowed,
    prepare_computations,
    shade_hit,
)

# Note: config is NOT imported here because it depends on the camera package,
# which itself imports scene.world. Import it directly:
#   from src.raytrace.scene.config import load_scene_file

__all__ = [
    "PointLight",
    "World",
    "Computations",
    "default_world",
    "intersect_world",
    "prepare_computations",
    "is_shadowed",
    "shade_hit",
    "color_at",
]
