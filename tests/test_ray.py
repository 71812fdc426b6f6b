"""Unit tests for the Ray data structure.

Tests cover:
- Ray creation and field access
- Point evaluation along a ray
- Translating and scaling rays
"""

import pytest


class TestRayBasics:
    """Tests for Ray creation and evaluation."""

    def test_create_ray(self):
        from src.raytrace.core.ray import Ray
        from src.raytrace.core.tuples import equal, point, vector

        origin = point(1, 2, 3)
        direction = vector(4, 5, 6)
        ray = Ray(origin, direction)
        assert equal(ray.origin, origin)
        assert equal(ray.direction, direction)

    def test_ray_is_frozen(self):
        """Rays are immutable value types."""
        import dataclasses

        from src.raytrace.core.ray import Ray
        from src.raytrace.core.tuples import point, vector

        ray = Ray(point(1, 2, 3), vector(4, 5, 6))
        with pytest.raises(dataclasses.FrozenInstanceError):
            ray.origin = point(0, 0, 0)

    @pytest.mark.parametrize(
        "t,expected",
        [(0, (2, 3, 4)), (1, (3, 3, 4)), (-1, (1, 3, 4)), (2.5, (4.5, 3, 4))],
    )
    def test_position(self, t, expected):
        """Compute a point from a distance, including behind the origin."""
        from src.raytrace.core.ray import Ray, position
        from src.raytrace.core.tuples import equal, point, vector

        ray = Ray(point(2, 3, 4), vector(1, 0, 0))
        assert equal(position(ray, t), point(*expected))


class TestRayTransform:
    """Tests for transforming rays."""

    def test_translating_a_ray(self):
        from src.raytrace.core.ray import Ray, transform
        from src.raytrace.core.transforms import translation
        from src.raytrace.core.tuples import equal, point, vector

        ray = Ray(point(1, 2, 3), vector(0, 1, 0))
        moved = transform(ray, translation(3, 4, 5))
        assert equal(moved.origin, point(4, 6, 8))
        assert equal(moved.direction, vector(0, 1, 0))

    def test_scaling_a_ray(self):
        """Scaling changes the direction length; it is not renormalized."""
        from src.raytrace.core.ray import Ray, transform
        from src.raytrace.core.transforms import scaling
        from src.raytrace.core.tuples import equal, point, vector

        ray = Ray(point(1, 2, 3), vector(0, 1, 0))
        scaled = transform(ray, scaling(2, 3, 4))
        assert equal(scaled.origin, point(2, 6, 12))
        assert equal(scaled.direction, vector(0, 3, 0))

    def test_transform_returns_new_ray(self):
        from src.raytrace.core.ray import Ray, transform
        from src.raytrace.core.transforms import translation
        from src.raytrace.core.tuples import equal, point, vector

        ray = Ray(point(1, 2, 3), vector(0, 1, 0))
        transform(ray, translation(3, 4, 5))
        assert equal(ray.origin, point(1, 2, 3))
