"""Point light source.

A point light has a position and an intensity (color) and no size, so it
casts hard-edged shadows. Both attributes may be changed after construction,
for example to animate a light between renders; they must not change while
a render is in flight.
"""

from collections.abc import Sequence

from src.raytrace.core.tuples import Color, Tuple4, as_tuple, color


class PointLight:
    """A light with no size at a single point in space.

    Attributes:
        intensity: Light color and brightness (RGB, unclamped).
        position: Light position (point).
    """

    def __init__(self, intensity: Color | Sequence[float], position: Tuple4 | Sequence[float]) -> None:
        self.intensity = intensity
        self.position = position

    @property
    def intensity(self) -> Color:
        return self._intensity

    @intensity.setter
    def intensity(self, value: Color | Sequence[float]) -> None:
        self._intensity = color(*value)

    @property
    def position(self) -> Tuple4:
        return self._position

    @position.setter
    def position(self, value: Tuple4 | Sequence[float]) -> None:
        position = as_tuple(value)
        if position[3] != 1.0:
            raise ValueError(f"Light position must be a point (w=1), got w={position[3]}")
        self._position = position

    def __repr__(self) -> str:
        return (
            f"PointLight(intensity={tuple(self._intensity.tolist())}, "
            f"position={tuple(self._position[:3].tolist())})"
        )
