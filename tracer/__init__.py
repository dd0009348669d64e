"""Tuples, matrices and a PPM canvas for a small ray tracer.

Points, vectors and colors are fixed-size tuples; 4x4 matrices build and
invert the affine transforms applied to them, and a canvas turns colors into
plain-text PPM images.
"""

from __future__ import annotations

__version__ = "0.1.0"

from tracer.canvas import Canvas
from tracer.matrix import Matrix, SingularMatrixError, identity
from tracer.tuples import Color, Tuple4, approx_equal, point, vector
