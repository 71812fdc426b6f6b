"""Intersection records and hit selection.

An Intersection pairs a ray parameter ``t`` with the shape that was hit. The
shape is a plain reference: the World owns its shapes, and intersections are
short-lived values produced while tracing a single ray.

Intersections collects records from one or more shapes and keeps them sorted
by ``t``. The sort is stable, so records with equal ``t`` keep the order in
which their shapes were tested.

Example:
    >>> from src.raytrace.geometry.intersection import Intersection, Intersections
    >>> from src.raytrace.geometry.sphere import Sphere
    >>> s = Sphere()
    >>> xs = Intersections(Intersection(5, s), Intersection(-3, s), Intersection(2, s))
    >>> xs.hit().t
    2
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from src.raytrace.geometry.shape import Shape


@dataclass(frozen=True)
class Intersection:
    """A single ray-shape intersection.

    Attributes:
        t: Parameter along the ray. Negative values lie behind the origin.
        shape: The shape that was intersected.
    """

    t: float
    shape: Shape


class Intersections(Sequence[Intersection]):
    """An immutable collection of intersections sorted by t."""

    def __init__(self, *intersections: Intersection) -> None:
        self._items: tuple[Intersection, ...] = tuple(
            sorted(intersections, key=lambda i: i.t)
        )

    @overload
    def __getitem__(self, index: int) -> Intersection: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Intersection]: ...

    def __getitem__(self, index: int | slice) -> Intersection | Sequence[Intersection]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Intersection]:
        return iter(self._items)

    @property
    def t_values(self) -> list[float]:
        """The t parameter of every intersection, ascending."""
        return [i.t for i in self._items]

    def hit(self) -> Intersection | None:
        """Select the visible intersection.

        Returns:
            The intersection with the smallest non-negative t, or None when
            every intersection lies behind the ray origin (or there are none).
        """
        for intersection in self._items:
            if intersection.t >= 0:
                return intersection
        return None

    def __repr__(self) -> str:
        return f"Intersections(t={self.t_values})"


def combine_intersections(*collections: Intersections) -> Intersections:
    """Merge several collections into one sorted collection.

    Args:
        *collections: The collections to merge, typically one per shape.

    Returns:
        A new Intersections containing every record, sorted by t.
    """
    merged: list[Intersection] = []
    for collection in collections:
        merged.extend(collection)
    return Intersections(*merged)
