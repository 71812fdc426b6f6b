"""Points, vectors, and colors for the ray tracer.

Every geometric value is a four-component NumPy array (x, y, z, w) where
w=1 marks a point and w=0 a vector. Colors are three-component arrays
(r, g, b). All arrays returned from this module are read-only so they can be
shared freely between shapes, rays, and intersection records.

Example:
    >>> from src.raytrace.core.tuples import point, vector, add, equal
    >>> p = add(point(1.0, 2.0, 3.0), vector(0.0, 0.0, 1.0))
    >>> equal(p, point(1.0, 2.0, 4.0))
    True
"""

import math

import numpy as np
import numpy.typing as npt

# Tolerance used by every approximate comparison in the renderer
EPSILON = 1e-5

# Type alias for tuple and color arrays
Tuple4 = npt.NDArray[np.float64]
Color = npt.NDArray[np.float64]


def _freeze(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Return a read-only float64 copy of values."""
    arr = np.array(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr


# =============================================================================
# Construction
# =============================================================================


def tuple4(x: float, y: float, z: float, w: float) -> Tuple4:
    """Create a raw four-component tuple."""
    return _freeze((x, y, z, w))


def point(x: float, y: float, z: float) -> Tuple4:
    """Create a point (w=1)."""
    return _freeze((x, y, z, 1.0))


def vector(x: float, y: float, z: float) -> Tuple4:
    """Create a vector (w=0)."""
    return _freeze((x, y, z, 0.0))


def color(r: float, g: float, b: float) -> Color:
    """Create an RGB color. Components are not clamped."""
    return _freeze((r, g, b))


def as_tuple(values: npt.ArrayLike) -> Tuple4:
    """Freeze an arbitrary four-element sequence as a tuple."""
    arr = _freeze(values)
    if arr.shape != (4,):
        raise ValueError(f"Expected 4 components, got shape {arr.shape}")
    return arr


def is_point(t: Tuple4) -> bool:
    return bool(t[3] == 1.0)


def is_vector(t: Tuple4) -> bool:
    return bool(t[3] == 0.0)


BLACK = color(0.0, 0.0, 0.0)
WHITE = color(1.0, 1.0, 1.0)
ORIGIN = point(0.0, 0.0, 0.0)


# =============================================================================
# Comparison
# =============================================================================


def float_equal(a: float, b: float) -> bool:
    """Compare two scalars within EPSILON."""
    return abs(a - b) < EPSILON


def equal(a: npt.ArrayLike, b: npt.ArrayLike) -> bool:
    """Compare two tuples or colors component-wise within EPSILON."""
    a_arr = np.asarray(a, dtype=np.float64)
    b_arr = np.asarray(b, dtype=np.float64)
    if a_arr.shape != b_arr.shape:
        return False
    return bool(np.all(np.abs(a_arr - b_arr) < EPSILON))


# =============================================================================
# Arithmetic
# =============================================================================


def add(a: Tuple4, b: Tuple4) -> Tuple4:
    """Add two tuples. Adding two points yields w=2 and is meaningless."""
    return _freeze(a + b)


def subtract(a: Tuple4, b: Tuple4) -> Tuple4:
    """Subtract b from a (point - point gives a vector)."""
    return _freeze(a - b)


def negate(t: Tuple4) -> Tuple4:
    return _freeze(-t)


def multiply(t: Tuple4, scalar: float) -> Tuple4:
    return _freeze(t * scalar)


def divide(t: Tuple4, scalar: float) -> Tuple4:
    return _freeze(t / scalar)


def hadamard(a: Color, b: Color) -> Color:
    """Component-wise (Hadamard) product of two colors."""
    return _freeze(a * b)


# =============================================================================
# Vector Algebra
# =============================================================================


def magnitude(t: Tuple4) -> float:
    """Compute the Euclidean length over all four components."""
    return math.sqrt(float(np.dot(t, t)))


def normalize(t: Tuple4) -> Tuple4:
    """Scale a vector to unit length.

    Args:
        t: The vector to normalize.

    Returns:
        A unit vector in the same direction as t.

    Raises:
        ValueError: If t has zero magnitude.
    """
    length = magnitude(t)
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return _freeze(t / length)


def dot(a: Tuple4, b: Tuple4) -> float:
    """Dot product over all four components."""
    return float(np.dot(a, b))


def cross(a: Tuple4, b: Tuple4) -> Tuple4:
    """Cross product of two vectors. The result is always a vector."""
    return vector(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def reflect(incoming: Tuple4, normal: Tuple4) -> Tuple4:
    """Reflect an incoming vector about a normal.

    Args:
        incoming: The vector travelling toward the surface.
        normal: The surface normal (should be normalized).

    Returns:
        incoming - normal * 2 * dot(incoming, normal).
    """
    return _freeze(incoming - normal * 2.0 * np.dot(incoming, normal))
