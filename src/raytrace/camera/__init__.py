"""Camera module for view and ray generation.

Components:
    camera: Pinhole camera, pixel-to-ray mapping, and the serial render loop

Ray generation uses pixel coordinates:
    x in [0, hsize): left to right across the image
    y in [0, vsize): top to bottom across the image

Rays pass through pixel centers; the camera transform positions the camera
in the world, usually built with view_transform().
"""

from .camera import Camera, ray_for_pixel, render, render_row

__all__ = [
    "Camera",
    "ray_for_pixel",
    "render",
    "render_row",
]
