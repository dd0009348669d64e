"""Fixed-size numeric tuples for points, vectors and colors.

This module provides the value types the rest of the library works with:
homogeneous 4-component tuples (points with w=1, vectors with w=0) and
3-component RGB colors. Both are backed by read-only numpy arrays and every
operation returns a new value.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np


def approx_equal(a: float, b: float, epsilon: float) -> bool:
    """Check whether two floats differ by less than epsilon.

    This is a tolerance predicate, not an ordering. It is not transitive and
    must not be used for sorting or hashing.

    Args:
        a: First value
        b: Second value
        epsilon: Tolerance

    Returns:
        True if |a - b| < epsilon
    """
    return abs(a - b) < epsilon


class _FixedTuple:
    """Base class for fixed-length float tuples."""

    SIZE = 0
    __slots__ = ("_data",)

    # tolerance equality only, see equal()
    __hash__ = None

    def __init__(self, *components: float):
        if len(components) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} expects {self.SIZE} components, got {len(components)}"
            )
        data = np.array(components, dtype=np.float64)
        data.setflags(write=False)
        self._data = data

    @classmethod
    def _from_array(cls, data: np.ndarray):
        return cls(*data.tolist())

    def _check_same_kind(self, other) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}"
            )

    @property
    def data(self) -> np.ndarray:
        """Read-only numpy view of the components."""
        return self._data

    @property
    def components(self) -> Tuple[float, ...]:
        return tuple(self._data.tolist())

    def __len__(self) -> int:
        return self.SIZE

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __repr__(self) -> str:
        values = ", ".join(f"{v:g}" for v in self._data)
        return f"{type(self).__name__}({values})"

    def add(self, other):
        self._check_same_kind(other)
        return self._from_array(self._data + other._data)

    def subtract(self, other):
        self._check_same_kind(other)
        return self._from_array(self._data - other._data)

    def multiply(self, scalar: float):
        return self._from_array(self._data * scalar)

    def divide(self, scalar: float):
        return self._from_array(self._data / scalar)

    def negate(self):
        return self.multiply(-1.0)

    def magnitude(self) -> float:
        return float(np.sqrt(np.sum(self._data**2)))

    def normalize(self):
        """Scale to unit length. A zero tuple is returned unchanged."""
        m = self.magnitude()
        if m == 0.0:
            m = 1.0
        return self.divide(m)

    def is_zero(self) -> bool:
        return not np.any(self._data)

    def dot(self, other) -> float:
        self._check_same_kind(other)
        return float(np.dot(self._data, other._data))

    def equal(self, other, epsilon: float) -> bool:
        """Component-wise comparison within epsilon.

        Tuples of a different kind are never equal.
        """
        if type(other) is not type(self):
            return False
        return all(
            approx_equal(a, b, epsilon)
            for a, b in zip(self._data.tolist(), other._data.tolist())
        )

    __add__ = add
    __sub__ = subtract

    def __mul__(self, scalar: float):
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float):
        return self.divide(scalar)

    def __neg__(self):
        return self.negate()


class Tuple4(_FixedTuple):
    """Homogeneous coordinate (x, y, z, w).

    w is 1 for points and 0 for vectors. The tag is carried through affine
    transforms by the bottom matrix row and is not checked by arithmetic.
    """

    SIZE = 4
    __slots__ = ()

    def __init__(self, x: float, y: float, z: float, w: float):
        super().__init__(x, y, z, w)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    @property
    def w(self) -> float:
        return float(self._data[3])

    def is_point(self) -> bool:
        return self.w == 1.0

    def is_vector(self) -> bool:
        return self.w == 0.0

    def cross(self, other: Tuple4) -> Tuple4:
        """Cross product of the xyz parts. The result is always a vector."""
        self._check_same_kind(other)
        return vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


class Color(_FixedTuple):
    """RGB color. Channels are nominally in [0, 1] but are not clamped."""

    SIZE = 3
    __slots__ = ()

    def __init__(self, red: float, green: float, blue: float):
        super().__init__(red, green, blue)

    @property
    def red(self) -> float:
        return float(self._data[0])

    @property
    def green(self) -> float:
        return float(self._data[1])

    @property
    def blue(self) -> float:
        return float(self._data[2])

    def product(self, other: Color) -> Color:
        """Hadamard (channel-wise) product used to blend colors."""
        self._check_same_kind(other)
        return Color._from_array(self._data * other._data)


def point(x: float, y: float, z: float) -> Tuple4:
    """Create a point (w=1)."""
    return Tuple4(x, y, z, 1.0)


def vector(x: float, y: float, z: float) -> Tuple4:
    """Create a direction vector (w=0)."""
    return Tuple4(x, y, z, 0.0)


BLACK = Color(0.0, 0.0, 0.0)
