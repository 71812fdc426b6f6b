"""Square matrices with cofactor-based inversion.

Matrices are row-major NumPy arrays of shape 2x2, 3x3, or 4x4. Determinants
and inverses are computed by cofactor expansion rather than LU factorisation
so that results are reproducible bit-for-bit across platforms and match the
reference values used by the test suite.

Transform matrices are always 4x4. Composition follows the usual
convention: ``multiply(a, b)`` applied to a tuple applies b first, then a.

Example:
    >>> from src.raytrace.core.matrix import identity, inverse, matrix, matrix_equal, multiply
    >>> m = matrix([2, 0, 0, 0], [0, 2, 0, 0], [0, 0, 2, 0], [0, 0, 0, 1])
    >>> matrix_equal(multiply(m, inverse(m)), identity())
    True
"""

import numpy as np
import numpy.typing as npt

from src.raytrace.core.tuples import EPSILON, Tuple4, as_tuple

# Type alias for matrix arrays
Matrix = npt.NDArray[np.float64]

SUPPORTED_SIZES = (2, 3, 4)


class NotInvertibleError(ValueError):
    """Raised when inverting a matrix whose determinant is zero."""


def _freeze(values: npt.ArrayLike) -> Matrix:
    arr = np.array(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr


# =============================================================================
# Construction
# =============================================================================


def matrix(*rows: npt.ArrayLike) -> Matrix:
    """Build a read-only square matrix from its rows.

    Args:
        *rows: The matrix rows, each with as many entries as there are rows.

    Returns:
        The matrix as a read-only float64 array.

    Raises:
        ValueError: If the matrix is not square or not 2x2, 3x3, or 4x4.
    """
    m = _freeze(rows)
    if m.ndim != 2 or m.shape[0] != m.shape[1] or m.shape[0] not in SUPPORTED_SIZES:
        raise ValueError(f"Unsupported matrix shape {m.shape}; expected 2x2, 3x3 or 4x4")
    return m


def identity(size: int = 4) -> Matrix:
    """Return the identity matrix of the given size."""
    if size not in SUPPORTED_SIZES:
        raise ValueError(f"Unsupported matrix size {size}")
    return _freeze(np.eye(size))


IDENTITY = identity()


# =============================================================================
# Element Access
# =============================================================================


def row(m: Matrix, index: int) -> npt.NDArray[np.float64]:
    return _freeze(m[index, :])


def column(m: Matrix, index: int) -> npt.NDArray[np.float64]:
    return _freeze(m[:, index])


def matrix_equal(a: Matrix, b: Matrix) -> bool:
    """Compare two matrices element-wise within EPSILON."""
    a_arr = np.asarray(a, dtype=np.float64)
    b_arr = np.asarray(b, dtype=np.float64)
    if a_arr.shape != b_arr.shape:
        return False
    return bool(np.all(np.abs(a_arr - b_arr) < EPSILON))


# =============================================================================
# Products
# =============================================================================


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """Standard row-by-column product. Not commutative."""
    if a.shape != b.shape:
        raise ValueError(f"Cannot multiply matrices of shape {a.shape} and {b.shape}")
    return _freeze(a @ b)


def multiply_tuple(m: Matrix, t: Tuple4) -> Tuple4:
    """Multiply a 4x4 matrix by a point or vector."""
    if m.shape != (4, 4):
        raise ValueError(f"Tuples can only be multiplied by 4x4 matrices, got {m.shape}")
    return as_tuple(m @ as_tuple(t))


def transpose(m: Matrix) -> Matrix:
    return _freeze(m.T)


# =============================================================================
# Determinants and Inversion
# =============================================================================


def submatrix(m: Matrix, row_index: int, column_index: int) -> Matrix:
    """Remove one row and one column from a matrix."""
    reduced = np.delete(np.delete(m, row_index, axis=0), column_index, axis=1)
    return _freeze(reduced)


def minor(m: Matrix, row_index: int, column_index: int) -> float:
    """Determinant of the submatrix at (row_index, column_index)."""
    return determinant(submatrix(m, row_index, column_index))


def cofactor(m: Matrix, row_index: int, column_index: int) -> float:
    """Minor negated when row_index + column_index is odd."""
    value = minor(m, row_index, column_index)
    if (row_index + column_index) % 2 == 1:
        return -value
    return value


def determinant(m: Matrix) -> float:
    """Compute the determinant.

    2x2 matrices use the closed form ad - bc; larger matrices expand along
    the first row.
    """
    if m.shape == (2, 2):
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
    total = 0.0
    for c in range(m.shape[1]):
        total += float(m[0, c]) * cofactor(m, 0, c)
    return total


def is_invertible(m: Matrix) -> bool:
    return determinant(m) != 0.0


def inverse(m: Matrix) -> Matrix:
    """Invert a matrix via its adjugate.

    Each element of the result is cofactor(m, col, row) / determinant(m),
    which transposes the cofactor matrix and divides in one step.

    Args:
        m: The matrix to invert.

    Returns:
        The inverse matrix.

    Raises:
        NotInvertibleError: If the determinant of m is zero.
    """
    det = determinant(m)
    if det == 0.0:
        raise NotInvertibleError(f"Matrix is not invertible (determinant is 0):\n{m}")
    size = m.shape[0]
    result = np.zeros((size, size), dtype=np.float64)
    for r in range(size):
        for c in range(size):
            result[c, r] = cofactor(m, r, c) / det
    return _freeze(result)
