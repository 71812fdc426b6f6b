"""Tests for the parallel Taichi integrator.

This module tests the kernel render path including:
- Uploading worlds and cameras into device fields
- Capacity and render target limits
- Single pixel rendering against known shading values
- Whole-image agreement with the serial render path
- Shadows and multiple lights inside the kernels

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run, so module-level
imports of modules containing ti.field() declarations would fail.
"""

import math

import pytest


def _default_camera(width=11, height=11):
    from src.raytrace.camera.camera import Camera
    from src.raytrace.core.transforms import view_transform
    from src.raytrace.core.tuples import point, vector

    camera = Camera(width, height, math.pi / 2)
    camera.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
    return camera


class TestModule:
    """Test that the kernel module compiles its Taichi functions."""

    def test_module_imports(self):
        """Taichi functions need evaluated annotations, so postponed ones are not used."""
        import importlib

        integrator = importlib.import_module("src.raytrace.core.integrator")

        assert "annotations" not in vars(integrator)
        assert integrator.upload_world.__annotations__["return"] is None

    def test_kernels_compile_and_run(self, allocator):
        from src.raytrace.core.integrator import render_pixel, upload_camera, upload_world
        from src.raytrace.scene.world import World

        upload_world(World())
        upload_camera(_default_camera(2, 2))
        assert render_pixel(0, 0) == (0.0, 0.0, 0.0)


class TestSceneUpload:
    """Test copying worlds into the device fields."""

    def test_upload_default_world(self, allocator):
        from src.raytrace.core.integrator import get_light_count, get_shape_count, upload_world
        from src.raytrace.scene.world import default_world

        upload_world(default_world(allocator))
        assert get_shape_count() == 2
        assert get_light_count() == 1

    def test_upload_replaces_previous_world(self, allocator):
        from src.raytrace.core.integrator import get_light_count, get_shape_count, upload_world
        from src.raytrace.geometry.plane import Plane
        from src.raytrace.scene.world import World, default_world

        upload_world(default_world(allocator))
        upload_world(World(objects=[Plane(allocator=allocator)]))
        assert get_shape_count() == 1
        assert get_light_count() == 0

    def test_clear_world(self, allocator):
        from src.raytrace.core.integrator import (
            clear_world,
            get_light_count,
            get_shape_count,
            upload_world,
        )
        from src.raytrace.scene.world import default_world

        upload_world(default_world(allocator))
        clear_world()
        assert get_shape_count() == 0
        assert get_light_count() == 0

    def test_too_many_lights(self):
        from src.raytrace.core.integrator import MAX_LIGHTS, upload_world
        from src.raytrace.core.tuples import color, point
        from src.raytrace.scene.light import PointLight
        from src.raytrace.scene.world import World

        lights = [PointLight(color(1, 1, 1), point(0, 10, 0)) for _ in range(MAX_LIGHTS + 1)]
        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            upload_world(World(lights=lights))

    def test_too_many_shapes(self, allocator):
        from src.raytrace.core.integrator import MAX_SHAPES, upload_world
        from src.raytrace.geometry.sphere import Sphere
        from src.raytrace.scene.world import World

        shapes = [Sphere(allocator=allocator) for _ in range(MAX_SHAPES + 1)]
        with pytest.raises(RuntimeError, match="Maximum number of shapes"):
            upload_world(World(objects=shapes))


class TestRenderTarget:
    """Test render target setup and management."""

    def test_upload_camera_sizes_render_target(self):
        from src.raytrace.core.integrator import get_image_dimensions, get_image_numpy, upload_camera

        upload_camera(_default_camera(64, 48))
        assert get_image_dimensions() == (64, 48)
        assert get_image_numpy().shape == (64, 48, 3)

    def test_render_target_too_large(self):
        from src.raytrace.core.integrator import MAX_IMAGE_WIDTH, setup_render_target

        with pytest.raises(ValueError, match="exceed maximum supported"):
            setup_render_target(MAX_IMAGE_WIDTH + 1, 10)

    def test_setup_clears_buffer(self, allocator):
        import numpy as np

        from src.raytrace.core.integrator import (
            get_image_numpy,
            render_rows,
            setup_render_target,
            upload_camera,
            upload_world,
        )
        from src.raytrace.scene.world import default_world

        upload_world(default_world(allocator))
        upload_camera(_default_camera())
        render_rows(0, 11)
        assert np.any(get_image_numpy() > 0.0)

        setup_render_target(11, 11)
        assert np.all(get_image_numpy() == 0.0)

    def test_render_without_setup_raises_error(self):
        import src.raytrace.core.integrator as integrator
        from src.raytrace.core.integrator import render_pixel

        # Mark as not initialized
        original_value = integrator._render_target_initialized[None]
        integrator._render_target_initialized[None] = 0

        with pytest.raises(RuntimeError, match="Render target not set up"):
            render_pixel(0, 0)

        # Restore
        integrator._render_target_initialized[None] = original_value

    def test_invalid_row_range(self):
        from src.raytrace.core.integrator import render_rows, upload_camera

        upload_camera(_default_camera())
        with pytest.raises(ValueError, match="Row range"):
            render_rows(5, 12)
        with pytest.raises(ValueError, match="Row range"):
            render_rows(6, 5)


class TestPixelRendering:
    """Test shading of single pixels inside the kernels."""

    def test_center_pixel_of_default_world(self, allocator):
        from src.raytrace.core.integrator import render_pixel, upload_camera, upload_world
        from src.raytrace.scene.world import default_world

        upload_world(default_world(allocator))
        upload_camera(_default_camera())
        assert render_pixel(5, 5) == pytest.approx((0.38066, 0.47583, 0.2855), abs=1e-4)

    def test_miss_is_black(self, allocator):
        from src.raytrace.core.integrator import render_pixel, upload_camera, upload_world
        from src.raytrace.scene.world import default_world

        upload_world(default_world(allocator))
        upload_camera(_default_camera())
        # Corner rays pass beside the unit sphere
        assert render_pixel(0, 0) == (0.0, 0.0, 0.0)

    def test_empty_world_is_black(self):
        from src.raytrace.core.integrator import render_pixel, upload_camera, upload_world
        from src.raytrace.scene.world import World

        upload_world(World())
        upload_camera(_default_camera())
        assert render_pixel(5, 5) == (0.0, 0.0, 0.0)

    def test_shadowed_pixel_is_ambient_only(self, allocator):
        """A sphere hidden behind another from the light receives only ambient."""
        from src.raytrace.camera.camera import Camera
        from src.raytrace.core.integrator import render_pixel, upload_camera, upload_world
        from src.raytrace.core.transforms import translation, view_transform
        from src.raytrace.core.tuples import color, point, vector
        from src.raytrace.geometry.sphere import Sphere
        from src.raytrace.scene.light import PointLight
        from src.raytrace.scene.world import World

        s1 = Sphere(allocator=allocator)
        s2 = Sphere(transform=translation(0, 0, 10), allocator=allocator)
        world = World(objects=[s1, s2], lights=[PointLight(color(1, 1, 1), point(0, 0, -10))])

        # Look from between the spheres toward the far one
        camera = Camera(11, 11, math.pi / 2)
        camera.transform = view_transform(point(0, 0, 5), point(0, 0, 10), vector(0, 1, 0))

        upload_world(world)
        upload_camera(camera)
        assert render_pixel(5, 5) == pytest.approx((0.1, 0.1, 0.1), abs=1e-6)


class TestImageAgreement:
    """Test that the kernels reproduce the serial render path."""

    def test_default_world_matches_serial_render(self, allocator):
        from src.raytrace.camera.camera import render
        from src.raytrace.core.integrator import render_image
        from src.raytrace.preview.export import compute_rmse
        from src.raytrace.scene.world import default_world

        world = default_world(allocator)
        camera = _default_camera(21, 15)

        parallel = render_image(camera, world)
        serial = render(camera, world)

        assert (parallel.width, parallel.height) == (21, 15)
        assert compute_rmse(parallel.pixels, serial.pixels) < 1e-6

    def test_example_scene_matches_serial_render(self, allocator):
        """Planes, transforms, and shadows agree between both paths."""
        from pathlib import Path

        from src.raytrace.camera.camera import render
        from src.raytrace.core.integrator import render_image
        from src.raytrace.preview.export import compute_rmse
        from src.raytrace.scene.config import build_camera, build_world, load_scene_file

        scene = Path(__file__).parent.parent / "examples" / "scenes" / "three_spheres.json"
        config = load_scene_file(scene)
        world = build_world(config, allocator)
        camera = build_camera(config, width=32, height=16)

        parallel = render_image(camera, world)
        serial = render(camera, world)

        assert compute_rmse(parallel.pixels, serial.pixels) < 1e-6

    def test_two_lights_match_serial_render(self, allocator):
        from src.raytrace.camera.camera import render
        from src.raytrace.core.integrator import render_image
        from src.raytrace.core.tuples import color, point
        from src.raytrace.preview.export import compute_rmse
        from src.raytrace.scene.light import PointLight
        from src.raytrace.scene.world import default_world

        world = default_world(allocator)
        world.add_light(PointLight(color(0.3, 0.2, 0.5), point(5, 5, -5)))
        camera = _default_camera(16, 16)

        assert compute_rmse(render_image(camera, world).pixels, render(camera, world).pixels) < 1e-6

    def test_banded_rows_match_full_render(self, allocator):
        import numpy as np

        from src.raytrace.core.integrator import (
            get_image_numpy,
            render_image,
            render_rows,
            upload_camera,
            upload_world,
        )
        from src.raytrace.scene.world import default_world

        world = default_world(allocator)
        camera = _default_camera(12, 9)
        full = render_image(camera, world).pixels

        upload_world(world)
        upload_camera(camera)
        for row_start in range(0, 9, 4):
            render_rows(row_start, min(row_start + 4, 9))

        np.testing.assert_allclose(get_image_numpy(), full)

    def test_no_nan_in_rendered_image(self, allocator):
        import numpy as np

        from src.raytrace.core.integrator import render_image
        from src.raytrace.scene.world import default_world

        canvas = render_image(_default_camera(16, 16), default_world(allocator))
        assert not np.any(np.isnan(canvas.pixels))
