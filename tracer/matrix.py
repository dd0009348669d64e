"""Square matrix algebra for affine transforms.

This module implements the matrix operations the renderer needs:
multiplication, transposition and inversion through the classical adjugate
formula. Determinants are computed by recursive cofactor expansion along the
first row rather than by LU decomposition.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple, Union

import numpy as np

from tracer.tuples import _FixedTuple, approx_equal

logger = logging.getLogger(__name__)


class SingularMatrixError(ValueError):
    """Raised when inverting a matrix whose determinant is (close to) zero."""

    def __init__(self, determinant: float, epsilon: float):
        super().__init__(
            f"Matrix has determinant {determinant:g} (epsilon={epsilon:g}): cannot be inverted"
        )
        self.determinant = determinant
        self.epsilon = epsilon


class Matrix:
    """Rectangular grid of floats stored row-major.

    Algebraic operations return new matrices. Individual cells can be
    updated in place with ``m[row, col] = value``.
    """

    __hash__ = None

    def __init__(self, rows: Union[Sequence[Sequence[float]], np.ndarray]):
        """Initialize from nested rows.

        Args:
            rows: Nested sequence or 2D array, one entry per row

        Raises:
            ValueError: If rows are ragged, empty or not two-dimensional
        """
        if isinstance(rows, np.ndarray):
            data = rows.astype(np.float64, copy=True)
        else:
            rows = [list(row) for row in rows]
            if rows and any(len(row) != len(rows[0]) for row in rows):
                raise ValueError("All matrix rows must have the same length")
            data = np.array(rows, dtype=np.float64)

        if data.ndim != 2 or data.size == 0:
            raise ValueError(f"Expected a non-empty 2D matrix, got shape {data.shape}")

        self._data = data

    @classmethod
    def zeros(cls, width: int, height: int) -> Matrix:
        return cls(np.zeros((height, width)))

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self._data.shape

    def get(self, row: int, col: int) -> float:
        return float(self._data[row, col])

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        return self.get(row, col)

    def __setitem__(self, index: Tuple[int, int], value: float) -> None:
        row, col = index
        self._data[row, col] = value

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def rows(self) -> List[List[float]]:
        return self._data.tolist()

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()})"

    def equal(self, other: Matrix, epsilon: float) -> bool:
        """Element-wise comparison within epsilon.

        Matrices of different shapes are never equal.
        """
        if self.shape != other.shape:
            return False

        return all(
            approx_equal(a, b, epsilon)
            for a, b in zip(self._data.ravel().tolist(), other._data.ravel().tolist())
        )

    def multiply(self, other: Matrix) -> Matrix:
        """Matrix product self @ other.

        Args:
            other: Matrix with as many rows as self has columns

        Returns:
            height x other.width matrix
        """
        if self.width != other.height:
            raise ValueError(
                f"Cannot multiply {self.height}x{self.width} by {other.height}x{other.width} matrix"
            )
        return Matrix(self._data @ other._data)

    def multiply_tuple(self, t: _FixedTuple):
        """Apply the matrix to a column tuple.

        For homogeneous tuples the w component is carried through by the
        bottom row, so translations move points but leave vectors alone.

        Args:
            t: Tuple with as many components as the matrix has columns

        Returns:
            Tuple of the same class as t
        """
        if self.width != self.height or self.width != len(t):
            raise ValueError(
                f"Cannot apply {self.height}x{self.width} matrix to {type(t).__name__} of size {len(t)}"
            )
        return type(t)._from_array(self._data @ t.data)

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self.multiply(other)
        if isinstance(other, _FixedTuple):
            return self.multiply_tuple(other)
        return NotImplemented

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def submatrix(self, row: int, col: int) -> Matrix:
        """Matrix with the given row and column removed."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Cell ({row}, {col}) outside {self.height}x{self.width} matrix")
        if self.height < 2 or self.width < 2:
            raise ValueError(f"Cannot take a submatrix of a {self.height}x{self.width} matrix")

        reduced = np.delete(np.delete(self._data, row, axis=0), col, axis=1)
        return Matrix(reduced)

    def determinant(self) -> float:
        """Determinant by cofactor expansion along the first row.

        The expansion recurses down to 2x2 blocks, so the cost grows as N!.
        That is fine for the 4x4 transforms this library exists for but the
        algorithm should be replaced before it is used on large matrices.
        """
        if self.width != self.height:
            raise ValueError(f"Determinant requires a square matrix, got {self.height}x{self.width}")

        m = self._data
        if self.width == 1:
            return float(m[0, 0])
        if self.width == 2:
            return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

        det = 0.0
        for col in range(self.width):
            det += m[0, col] * self.cofactor(0, col)
        return float(det)

    def minor(self, row: int, col: int) -> float:
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        """Minor with the checkerboard sign applied."""
        minor = self.minor(row, col)
        if (row + col) % 2 == 1:
            return -minor
        return minor

    def is_invertible(self, epsilon: float) -> bool:
        return not approx_equal(self.determinant(), 0.0, epsilon)

    def inverse(self, epsilon: float) -> Matrix:
        """Invert the matrix with the adjugate formula.

        Args:
            epsilon: Tolerance below which the determinant counts as zero

        Returns:
            Matrix M such that self @ M is the identity within epsilon

        Raises:
            SingularMatrixError: If the determinant is within epsilon of zero
        """
        det = self.determinant()
        if approx_equal(det, 0.0, epsilon):
            logger.debug(f"Refusing to invert {self.height}x{self.width} matrix: det={det:g}")
            raise SingularMatrixError(det, epsilon)

        # Cofactors divided by the determinant, then transposed (adjugate / det)
        cofactors = np.empty_like(self._data)
        for row in range(self.height):
            for col in range(self.width):
                cofactors[row, col] = self.cofactor(row, col) / det

        logger.debug(f"Inverted {self.height}x{self.width} matrix: det={det:.6g}")
        return Matrix(cofactors).transpose()


def identity(size: int) -> Matrix:
    """Create a size x size identity matrix."""
    if size < 1:
        raise ValueError(f"Identity size must be positive, got {size}")
    return Matrix(np.eye(size))
