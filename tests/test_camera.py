"""Unit tests for the perspective camera and the serial render loop.

Tests cover:
- Camera construction and validation
- Pixel size for horizontal and vertical canvases
- Ray generation through the center and corner of the canvas
- Ray generation with a transformed camera
- Rendering the default world
"""

import math

import pytest


class TestCameraConstruction:
    """Tests for camera construction."""

    def test_constructing_camera(self):
        from src.raytrace.core.matrix import IDENTITY, matrix_equal
        from src.raytrace.camera.camera import Camera

        c = Camera(160, 120, math.pi / 2)
        assert c.hsize == 160
        assert c.vsize == 120
        assert c.field_of_view == pytest.approx(math.pi / 2)
        assert matrix_equal(c.transform, IDENTITY)

    @pytest.mark.parametrize("hsize,vsize", [(200, 125), (125, 200)], ids=["horizontal", "vertical"])
    def test_pixel_size(self, hsize, vsize):
        from src.raytrace.camera.camera import Camera

        c = Camera(hsize, vsize, math.pi / 2)
        assert c.pixel_size == pytest.approx(0.01)

    def test_square_canvas_half_extents(self):
        from src.raytrace.camera.camera import Camera

        c = Camera(100, 100, math.pi / 2)
        assert c.half_width == pytest.approx(1.0)
        assert c.half_height == pytest.approx(1.0)

    @pytest.mark.parametrize("hsize,vsize", [(0, 10), (10, 0), (-1, 10)])
    def test_invalid_dimensions(self, hsize, vsize):
        from src.raytrace.camera.camera import Camera

        with pytest.raises(ValueError, match="dimensions"):
            Camera(hsize, vsize, math.pi / 2)

    @pytest.mark.parametrize("fov", [0.0, math.pi, -1.0, 4.0])
    def test_invalid_field_of_view(self, fov):
        from src.raytrace.camera.camera import Camera

        with pytest.raises(ValueError, match="Field of view"):
            Camera(10, 10, fov)

    def test_singular_transform_rejected(self):
        from src.raytrace.core.matrix import IDENTITY, NotInvertibleError, matrix_equal
        from src.raytrace.core.transforms import scaling
        from src.raytrace.camera.camera import Camera

        c = Camera(10, 10, math.pi / 2)
        with pytest.raises(NotInvertibleError):
            c.transform = scaling(0, 0, 0)
        assert matrix_equal(c.transform, IDENTITY)


class TestRayForPixel:
    """Tests for ray_for_pixel."""

    def test_ray_through_center(self):
        from src.raytrace.camera.camera import Camera, ray_for_pixel
        from src.raytrace.core.tuples import equal, point, vector

        c = Camera(201, 101, math.pi / 2)
        r = ray_for_pixel(c, 100, 50)
        assert equal(r.origin, point(0, 0, 0))
        assert equal(r.direction, vector(0, 0, -1))

    def test_ray_through_corner(self):
        from src.raytrace.camera.camera import Camera, ray_for_pixel
        from src.raytrace.core.tuples import equal, point, vector

        c = Camera(201, 101, math.pi / 2)
        r = ray_for_pixel(c, 0, 0)
        assert equal(r.origin, point(0, 0, 0))
        assert equal(r.direction, vector(0.66519, 0.33259, -0.66851))

    def test_ray_with_transformed_camera(self):
        from src.raytrace.camera.camera import Camera, ray_for_pixel
        from src.raytrace.core.matrix import multiply
        from src.raytrace.core.transforms import rotation_y, translation
        from src.raytrace.core.tuples import equal, point, vector

        c = Camera(201, 101, math.pi / 2)
        c.transform = multiply(rotation_y(math.pi / 4), translation(0, -2, 5))
        r = ray_for_pixel(c, 100, 50)
        s = math.sqrt(2) / 2
        assert equal(r.origin, point(0, 2, -5))
        assert equal(r.direction, vector(s, 0, -s))

    def test_ray_direction_is_normalized(self):
        from src.raytrace.camera.camera import Camera, ray_for_pixel
        from src.raytrace.core.tuples import float_equal, magnitude

        c = Camera(64, 32, math.pi / 3)
        for px, py in [(0, 0), (63, 31), (10, 20)]:
            assert float_equal(magnitude(ray_for_pixel(c, px, py).direction), 1.0)


class TestRender:
    """Tests for the serial render loop."""

    def test_render_default_world(self, allocator):
        from src.raytrace.camera.camera import Camera, render
        from src.raytrace.core.transforms import view_transform
        from src.raytrace.core.tuples import point, vector
        from src.raytrace.scene.world import default_world

        c = Camera(11, 11, math.pi / 2)
        c.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
        image = render(c, default_world(allocator))

        assert image.width == 11
        assert image.height == 11
        assert image.pixel_at(5, 5) == pytest.approx([0.38066, 0.47583, 0.2855], abs=1e-4)

    def test_render_empty_world_is_black(self):
        import numpy as np

        from src.raytrace.camera.camera import Camera, render
        from src.raytrace.scene.world import World

        image = render(Camera(4, 3, math.pi / 2), World())
        assert np.all(image.pixels == 0.0)

    def test_render_is_deterministic(self, allocator):
        import numpy as np

        from src.raytrace.camera.camera import Camera, render
        from src.raytrace.core.transforms import view_transform
        from src.raytrace.core.tuples import point, vector
        from src.raytrace.scene.world import default_world

        c = Camera(8, 6, math.pi / 2)
        c.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
        w = default_world(allocator)
        np.testing.assert_array_equal(render(c, w).pixels, render(c, w).pixels)

    def test_render_row_writes_only_that_row(self, allocator):
        import numpy as np

        from src.raytrace.camera.camera import Camera, render_row
        from src.raytrace.core.transforms import view_transform
        from src.raytrace.core.tuples import point, vector
        from src.raytrace.preview.canvas import Canvas
        from src.raytrace.scene.world import default_world

        c = Camera(11, 11, math.pi / 2)
        c.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
        canvas = Canvas(11, 11)
        render_row(c, default_world(allocator), canvas, 5)

        assert canvas.pixel_at(5, 5) == pytest.approx([0.38066, 0.47583, 0.2855], abs=1e-4)
        assert np.all(canvas.pixels[:, 4] == 0.0)
        assert np.all(canvas.pixels[:, 6] == 0.0)
