"""Affine transform constructors.

Every transform is a 4x4 matrix built on the identity. Transforms compose
right to left: ``C @ B @ A`` applies A first, then B, then C. Rotations are
in radians and follow the left-handed convention, so a positive angle turns
+y towards +z about x, +z towards +x about y, and +x towards +y about z.
"""

from __future__ import annotations

import math

from tracer.matrix import Matrix, identity


def translation(x: float, y: float, z: float) -> Matrix:
    """Move points by (x, y, z). Vectors are unaffected."""
    m = identity(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def scaling(x: float, y: float, z: float) -> Matrix:
    m = identity(4)
    m[0, 0] = x
    m[1, 1] = y
    m[2, 2] = z
    return m


def rotation_x(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def rotation_y(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def rotation_z(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    m = identity(4)
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


def shearing(
    xy: float = 0.0,
    xz: float = 0.0,
    yx: float = 0.0,
    yz: float = 0.0,
    zx: float = 0.0,
    zy: float = 0.0,
) -> Matrix:
    """Shear each coordinate in proportion to the other two.

    Args:
        xy: Move x in proportion to y
        xz: Move x in proportion to z
        yx: Move y in proportion to x
        yz: Move y in proportion to z
        zx: Move z in proportion to x
        zy: Move z in proportion to y

    Returns:
        4x4 shearing matrix
    """
    m = identity(4)
    m[0, 1] = xy
    m[0, 2] = xz
    m[1, 0] = yx
    m[1, 2] = yz
    m[2, 0] = zx
    m[2, 1] = zy
    return m


def chain(*transforms: Matrix) -> Matrix:
    """Combine transforms so they apply in the order given.

    ``chain(A, B, C)`` is ``C @ B @ A``. With no arguments the identity is
    returned.
    """
    result = identity(4)
    for transform in transforms:
        result = transform.multiply(result)
    return result
