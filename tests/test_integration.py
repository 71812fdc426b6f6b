"""Integration tests for the end-to-end rendering pipeline.

This module tests the complete pipeline from scene creation through the
final image file. It verifies that all components work together correctly
and that the output files are well formed.

Tests are designed to be fast (low resolution) while still exercising the
full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import pytest

EXAMPLE_SCENE = Path(__file__).parent.parent / "examples" / "scenes" / "three_spheres.json"


def _read_ppm(path: Path) -> tuple[int, int, list[int]]:
    """Parse a P3 file into (width, height, channel values)."""
    tokens = path.read_text(encoding="ascii").split()
    assert tokens[0] == "P3"
    width, height, max_value = int(tokens[1]), int(tokens[2]), int(tokens[3])
    assert max_value == 255
    return width, height, [int(t) for t in tokens[4:]]


class TestDefaultWorldEndToEnd:
    """End-to-end rendering of the default world."""

    def test_default_world_to_ppm(self, tmp_path, allocator) -> None:
        """Render, export, and parse back the default world."""
        from src.raytrace.camera.camera import Camera, render
        from src.raytrace.core.transforms import view_transform
        from src.raytrace.core.tuples import point, vector
        from src.raytrace.preview.export import save_ppm
        from src.raytrace.scene.world import default_world

        camera = Camera(11, 11, math.pi / 2)
        camera.transform = view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0))
        path = tmp_path / "default.ppm"
        save_ppm(render(camera, default_world(allocator)), path)

        width, height, values = _read_ppm(path)
        assert (width, height) == (11, 11)
        assert len(values) == 11 * 11 * 3
        assert all(0 <= v <= 255 for v in values)

        # Center pixel: ceil(255 * (0.38066, 0.47583, 0.2855))
        center = (5 * 11 + 5) * 3
        assert values[center:center + 3] == [98, 122, 73]

        text = path.read_text(encoding="ascii")
        assert text.endswith("\n")
        assert all(len(line) < 70 for line in text.splitlines())

    def test_scene_file_to_png(self, tmp_path, allocator) -> None:
        from PIL import Image

        from src.raytrace.camera.camera import render
        from src.raytrace.preview.export import save_png
        from src.raytrace.scene.config import build_camera, build_world, load_scene_file

        config = load_scene_file(EXAMPLE_SCENE)
        canvas = render(build_camera(config, width=24, height=12), build_world(config, allocator))
        path = tmp_path / "scene.png"
        save_png(canvas, path)

        with Image.open(path) as img:
            assert img.size == (24, 12)
            data = np.asarray(img.convert("RGB"))

        # Floor and walls fill the frame, so nothing is left black
        assert data.mean() > 10


class TestExampleScript:
    """Tests for the render_default_world example script."""

    def test_render_scene_default_world(self, tmp_path) -> None:
        from examples.render_default_world import render_scene

        output = render_scene(width=8, height=4, output_path=str(tmp_path / "out.ppm"), quiet=True)

        width, height, values = _read_ppm(output)
        assert (width, height) == (8, 4)
        assert len(values) == 8 * 4 * 3

    def test_render_scene_taichi_matches_python(self, tmp_path) -> None:
        """Both backends write the same file for the same scene."""
        from examples.render_default_world import render_scene

        serial = render_scene(
            width=16, height=8, scene_path=str(EXAMPLE_SCENE),
            output_path=str(tmp_path / "serial.ppm"), quiet=True,
        )
        parallel = render_scene(
            width=16, height=8, scene_path=str(EXAMPLE_SCENE), backend="taichi",
            output_path=str(tmp_path / "parallel.ppm"), batch_rows=4, quiet=True,
        )

        _, _, serial_values = _read_ppm(serial)
        _, _, parallel_values = _read_ppm(parallel)
        mismatches = sum(a != b for a, b in zip(serial_values, parallel_values))
        # Allow rare off-by-one quantization at exact channel boundaries
        assert mismatches <= len(serial_values) // 100

    def test_render_scene_rejects_unknown_format(self, tmp_path) -> None:
        from examples.render_default_world import render_scene

        with pytest.raises(ValueError, match="Unsupported output format"):
            render_scene(width=4, height=4, output_path=str(tmp_path / "out.jpg"), quiet=True)

    def test_main_writes_image(self, tmp_path, monkeypatch, capsys) -> None:
        from examples.render_default_world import main

        output = tmp_path / "main.png"
        monkeypatch.setattr(
            "sys.argv",
            ["render_default_world", "--width", "6", "--height", "4", "--output", str(output)],
        )
        assert main() == 0
        assert output.exists()
        assert "Saved to" in capsys.readouterr().out

    def test_main_reports_errors(self, tmp_path, monkeypatch, capsys) -> None:
        from examples.render_default_world import main

        monkeypatch.setattr(
            "sys.argv",
            ["render_default_world", "--scene", str(tmp_path / "missing.json"), "--quiet"],
        )
        assert main() == 1
        assert "Error:" in capsys.readouterr().err
