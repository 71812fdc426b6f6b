"""Scene configuration and JSON scene files.

A scene file describes shapes, lights, and the camera as plain JSON so
scenes can be rendered without writing Python:

    {
      "camera": {"width": 100, "height": 50, "field_of_view": 1.0472,
                 "from": [0, 1.5, -5], "to": [0, 1, 0], "up": [0, 1, 0]},
      "lights": [{"position": [-10, 10, -10], "intensity": [1, 1, 1]}],
      "shapes": [
        {"type": "plane", "material": {"color": [1, 0.9, 0.9], "specular": 0}},
        {"type": "sphere",
         "transform": [{"scale": [0.5, 0.5, 0.5]}, {"translate": [1.5, 0.5, -0.5]}],
         "material": {"color": [0.5, 1, 0.1], "diffuse": 0.7, "specular": 0.3}}
      ]
    }

Transform operations are applied in the order listed, so the example sphere
is scaled first and then moved. Angles are in radians. Material keys are the
Material field names; omitted keys keep the Material defaults.

Example:
    >>> from src.raytrace.scene.config import build_camera, build_world, load_scene_file
    >>> config = load_scene_file("scene.json")
    >>> world = build_world(config)
    >>> camera = build_camera(config)
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any

from src.raytrace.camera.camera import Camera
from src.raytrace.core.matrix import Matrix
from src.raytrace.core.transforms import (
    chain,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from src.raytrace.core.tuples import color, point, vector
from src.raytrace.geometry.plane import Plane
from src.raytrace.geometry.shape import IdAllocator, Shape
from src.raytrace.geometry.sphere import Sphere
from src.raytrace.materials.phong import Material
from src.raytrace.scene.light import PointLight
from src.raytrace.scene.world import World

logger = logging.getLogger(__name__)

# Shape constructors by scene-file type name
SHAPE_TYPES: dict[str, type[Shape]] = {
    "sphere": Sphere,
    "plane": Plane,
}

DEFAULT_CAMERA: dict[str, Any] = {
    "width": 100,
    "height": 50,
    "field_of_view": math.pi / 3.0,
    "from": [0.0, 1.5, -5.0],
    "to": [0.0, 1.0, 0.0],
    "up": [0.0, 1.0, 0.0],
}


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        shapes: List of shape configurations.
        lights: List of light configurations.
        camera: Camera configuration; missing keys take DEFAULT_CAMERA values.
    """

    shapes: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    camera: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Create a configuration from a dictionary.

        Args:
            data: Dictionary with optional 'shapes', 'lights', 'camera' keys.

        Raises:
            ValueError: If data is not a dictionary or a section has the wrong
                type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scene must be a JSON object, got {type(data).__name__}")

        shapes = data.get("shapes", [])
        lights = data.get("lights", [])
        camera = data.get("camera", {})
        if not isinstance(shapes, list) or not isinstance(lights, list):
            raise ValueError("Scene 'shapes' and 'lights' must be lists")
        if not isinstance(camera, dict):
            raise ValueError("Scene 'camera' must be an object")

        return cls(shapes=list(shapes), lights=list(lights), camera=dict(camera))

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a dictionary (for JSON serialization)."""
        return {
            "shapes": self.shapes,
            "lights": self.lights,
            "camera": self.camera,
        }


# =============================================================================
# Scene Files
# =============================================================================


def load_scene_file(filepath: str | os.PathLike[str]) -> SceneConfig:
    """Load a scene configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or not a scene object.
    """
    with open(filepath, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {filepath}: {e}") from e

    config = SceneConfig.from_dict(data)
    logger.info(
        "Loaded scene %s: %d shapes, %d lights",
        filepath,
        len(config.shapes),
        len(config.lights),
    )
    return config


def save_scene_file(config: SceneConfig, filepath: str | os.PathLike[str]) -> None:
    """Write a scene configuration to a JSON file."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)


# =============================================================================
# Building Scene Objects
# =============================================================================


def _triple(value: Any, name: str) -> tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"'{name}' must be a list of 3 numbers, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


def build_transform(operations: list[dict[str, Any]]) -> Matrix:
    """Compose a list of transform operations, applied in listed order.

    Each operation is a single-key dictionary: 'translate', 'scale' and
    'shear' take lists (3, 3 and 6 numbers); 'rotate_x', 'rotate_y' and
    'rotate_z' take an angle in radians.

    Raises:
        ValueError: If an operation is unknown or malformed.
    """
    matrices = []
    for op in operations:
        if not isinstance(op, dict) or len(op) != 1:
            raise ValueError(f"Transform operation must have exactly one key, got {op!r}")
        name, args = next(iter(op.items()))

        if name == "translate":
            matrices.append(translation(*_triple(args, name)))
        elif name == "scale":
            matrices.append(scaling(*_triple(args, name)))
        elif name == "rotate_x":
            matrices.append(rotation_x(float(args)))
        elif name == "rotate_y":
            matrices.append(rotation_y(float(args)))
        elif name == "rotate_z":
            matrices.append(rotation_z(float(args)))
        elif name == "shear":
            if not isinstance(args, (list, tuple)) or len(args) != 6:
                raise ValueError(f"'shear' must be a list of 6 numbers, got {args!r}")
            matrices.append(shearing(*(float(a) for a in args)))
        else:
            raise ValueError(f"Unknown transform operation: {name}")

    return chain(*matrices)


def build_material(data: dict[str, Any]) -> Material:
    """Create a Material from a dictionary, keeping defaults for missing keys."""
    known = {"color", "ambient", "diffuse", "specular", "shininess"}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown material properties: {sorted(unknown)}")

    params: dict[str, Any] = {k: float(v) for k, v in data.items() if k != "color"}
    if "color" in data:
        params["color"] = color(*_triple(data["color"], "color"))
    return Material(**params)


def build_shape(data: dict[str, Any], allocator: IdAllocator | None = None) -> Shape:
    """Create a shape from one scene-file entry.

    Raises:
        ValueError: If the shape type is unknown or an entry is malformed.
        NotInvertibleError: If the transform is singular.
    """
    shape_type = str(data.get("type", "")).lower()
    if shape_type not in SHAPE_TYPES:
        raise ValueError(f"Unknown shape type: {shape_type}")

    shape = SHAPE_TYPES[shape_type](
        material=build_material(data.get("material", {})),
        allocator=allocator,
    )
    operations = data.get("transform", [])
    if operations:
        shape.transform = build_transform(operations)
    return shape


def build_light(data: dict[str, Any]) -> PointLight:
    position = _triple(data.get("position", [-10.0, 10.0, -10.0]), "position")
    intensity = _triple(data.get("intensity", [1.0, 1.0, 1.0]), "intensity")
    return PointLight(color(*intensity), point(*position))


def build_world(config: SceneConfig, allocator: IdAllocator | None = None) -> World:
    """Create a World holding every shape and light of the configuration."""
    world = World()
    for shape_config in config.shapes:
        world.add_object(build_shape(shape_config, allocator))
    for light_config in config.lights:
        world.add_light(build_light(light_config))
    return world


def build_camera(
    config: SceneConfig,
    width: int | None = None,
    height: int | None = None,
) -> Camera:
    """Create the configured camera.

    Args:
        config: The scene configuration.
        width: Optional image width overriding the configured one.
        height: Optional image height overriding the configured one.

    Returns:
        A Camera with its view transform set.
    """
    params = {**DEFAULT_CAMERA, **config.camera}
    camera = Camera(
        int(width if width is not None else params["width"]),
        int(height if height is not None else params["height"]),
        float(params["field_of_view"]),
    )
    camera.transform = view_transform(
        point(*_triple(params["from"], "from")),
        point(*_triple(params["to"], "to")),
        vector(*_triple(params["up"], "up")),
    )
    return camera
