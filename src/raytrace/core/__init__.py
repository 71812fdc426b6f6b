"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    tuples: Points, vectors, and colors as read-only NumPy arrays
    matrix: 2x2, 3x3, and 4x4 matrix algebra (determinant, inverse)
    transforms: Translation, scaling, rotation, shearing, view transform
    ray: Ray data structure, evaluation, and transformation
    backend: Taichi initialization for the parallel integrator
    integrator: Whitted-style shading written as Taichi kernels
    renderer: Row-by-row renderer over the serial or parallel backend

Every value in the serial path is an immutable float64 array, so scene data
can be shared freely between shapes, rays, and intersection records.
"""

from .matrix import (
    IDENTITY,
    Matrix,
    NotInvertibleError,
    cofactor,
    determinant,
    identity,
    inverse,
    is_invertible,
    matrix,
    matrix_equal,
    minor,
    multiply,
    multiply_tuple,
    submatrix,
    transpose,
)
from .ray import Ray, position, transform
from .transforms import (
    chain,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import (
    BLACK,
    EPSILON,
    ORIGIN,
    WHITE,
    Color,
    Tuple4,
    color,
    cross,
    dot,
    equal,
    magnitude,
    normalize,
    point,
    reflect,
    vector,
)

# Note: backend, integrator and renderer are NOT imported here. The integrator
# creates Taichi fields at import time, which requires ti.init() to run first.
#
# For rendering, use:
#   from src.raytrace.core.renderer import Renderer

__all__ = [
    # Tuples
    "EPSILON",
    "Tuple4",
    "Color",
    "point",
    "vector",
    "color",
    "equal",
    "magnitude",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "BLACK",
    "WHITE",
    "ORIGIN",
    # Matrices
    "Matrix",
    "NotInvertibleError",
    "matrix",
    "identity",
    "IDENTITY",
    "matrix_equal",
    "multiply",
    "multiply_tuple",
    "transpose",
    "submatrix",
    "minor",
    "cofactor",
    "determinant",
    "is_invertible",
    "inverse",
    # Transforms
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "view_transform",
    "chain",
    # Rays
    "Ray",
    "position",
    "transform",
]
