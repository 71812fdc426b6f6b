"""Python implementation of a Phong-shaded Whitted-style ray tracer.

This package renders scenes of analytic primitives lit by point lights, with
support for:
- Affine transforms built from 4x4 matrices (translate, scale, rotate, shear)
- Spheres and planes intersected in their own object space
- Phong illumination with hard shadows
- A serial NumPy reference renderer and a parallel Taichi renderer

Subpackages:
    core: Tuples, matrices, transforms, rays, and the render backends
    geometry: Shape abstraction, primitives, and intersection records
    materials: Phong material model and the lighting equation
    scene: Lights, world composition, and scene configuration
    camera: Pinhole camera with pixel-to-ray mapping
    preview: Image buffer and PPM/PNG export
"""

__version__ = "0.1.0"
