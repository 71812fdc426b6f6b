"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. The integrator
    stores 64-bit floats, so the default float type is f64.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_render_state():
    """Clear the parallel backend's scene and image before each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized
    from src.raytrace.core.integrator import clear_render_target, clear_world

    clear_world()
    clear_render_target()

    yield

    clear_world()
    clear_render_target()


@pytest.fixture
def allocator():
    """A fresh shape id allocator, isolated from the process-wide one."""
    from src.raytrace.geometry.shape import IdAllocator

    return IdAllocator()
