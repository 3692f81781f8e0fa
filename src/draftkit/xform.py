## generalized matrix transformation operations for 3D homogeneous
## coordinates in draftkit

## Copyright (c) 2026 draftkit contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import cos, sin, radians

import numpy as np

from draftkit.errors import InvalidGeometryError
from draftkit.geom import Point, Vector, close, epsilon

## a matrix is represented as a list of four rows of four numbers.
## Rows are rows unless the transpose property is true.  Points and
## vectors are treated as column vectors, so ``A.mul(B)`` applied to a
## point applies ``B`` first and ``A`` second.

## Points transform with an implicit w=1, vectors with w=0, which is
## to say that translations move points but not directions.


def _isgoodnum(x):
    return (not isinstance(x, bool)) and isinstance(x, (int, float, np.floating))


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, a=None, trans=False):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]
        self.trans = False

        if isinstance(a, Matrix):
            for i in range(4):
                self.setrow(i, a.getrow(i))

        elif isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
                for i in range(4):
                    for j in range(4):
                        x = a[i][j]
                        if _isgoodnum(x):
                            self.m[i][j] = float(x)
                        else:
                            raise InvalidGeometryError('bad element in matrix initialization: {}'.format(x))
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        x = a[i * 4 + j]
                        if _isgoodnum(x):
                            self.m[i][j] = float(x)
                        else:
                            raise InvalidGeometryError('bad element in matrix initialization: {}'.format(x))
            else:
                raise InvalidGeometryError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise InvalidGeometryError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans = trans

    def __repr__(self):
        return "Matrix({},{},{},{},{})".format(self.m[0], self.m[1],
                                               self.m[2], self.m[3], self.trans)

    # return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise IndexError('bad index passed to get: {},{}'.format(i, j))
        if self.trans:
            return self.m[j][i]
        return self.m[i][j]

    # set value indexed by i,j
    def set(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise IndexError('bad index passed to set: {},{}'.format(i, j))
        if not _isgoodnum(x):
            raise InvalidGeometryError('bad value passed to set: {}'.format(x))
        if self.trans:
            self.m[j][i] = float(x)
        else:
            self.m[i][j] = float(x)

    def getrow(self, i):
        if i < 0 or i > 3:
            raise IndexError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i], self.m[1][i], self.m[2][i], self.m[3][i]]
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise IndexError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]
        return list(self.m[j])

    def setrow(self, i, x):
        if len(x) != 4:
            raise InvalidGeometryError('bad non-vector passed to setrow: {}'.format(x))
        for j in range(4):
            self.set(i, j, x[j])

    def setcol(self, j, x):
        if len(x) != 4:
            raise InvalidGeometryError('bad non-vector passed to setcol: {}'.format(x))
        for i in range(4):
            self.set(i, j, x[i])

    def toarray(self):
        """the matrix as a ``numpy`` array, respecting the transpose flag"""
        return np.array([self.getrow(i) for i in range(4)], dtype=float)

    @staticmethod
    def fromarray(arr):
        return Matrix([[float(arr[i][j]) for j in range(4)] for i in range(4)])

    # matrix multiply.  If x is a matrix, compute MX.  If x is a Point
    # or Vector, compute Mx.  If x is a four-element list, compute the
    # raw product.  If x is a scalar, compute xM.  Respects transpose
    # flag.
    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(4):
                row = self.getrow(i)
                for j in range(4):
                    col = x.getcol(j)
                    result.set(i, j, sum(row[k] * col[k] for k in range(4)))
            return result
        elif isinstance(x, Point):
            v = self._mul4([x.x, x.y, x.z, 1.0])
            if abs(v[3]) < epsilon:
                raise InvalidGeometryError('point transformed to infinity')
            return Point(v[0] / v[3], v[1] / v[3], v[2] / v[3])
        elif isinstance(x, Vector):
            v = self._mul4([x.x, x.y, x.z, 0.0])
            return Vector(v[0], v[1], v[2])
        elif isinstance(x, (tuple, list)) and len(x) == 4:
            return self._mul4(list(x))
        elif _isgoodnum(x):
            result = Matrix()
            for i in range(4):
                result.setrow(i, [c * x for c in self.getrow(i)])
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def _mul4(self, v):
        return [sum(r * c for r, c in zip(self.getrow(i), v)) for i in range(4)]

    def inverse(self):
        """numeric inverse; fails fast on a singular matrix"""
        try:
            inv = np.linalg.inv(self.toarray())
        except np.linalg.LinAlgError as exc:
            raise InvalidGeometryError('singular matrix cannot be inverted') from exc
        return Matrix.fromarray(inv)

    def isclose(self, other):
        for i in range(4):
            for j in range(4):
                if not close(self.get(i, j), other.get(i, j)):
                    return False
        return True


def Identity():
    return Matrix()


# return the generalized 4x4 arbitrary axis rotation matrix
def Rotation(axis, angle, inverse=False):
    m = axis.length
    if m < epsilon:
        raise InvalidGeometryError('zero-length rotation axis not allowed')
    u = axis
    if not close(m, 1.0):
        u = axis / m

    if inverse:
        angle *= -1.0
    rad = radians(angle % 360.0)

    ux = u.x
    uy = u.y
    uz = u.z

    cang = cos(rad)
    cmin = 1.0 - cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux * ux * cmin, ux * uy * cmin - uz * sang, ux * uz * cmin + uy * sang, 0],
         [uy * ux * cmin + uz * sang, cang + uy * uy * cmin, uy * uz * cmin - ux * sang, 0],
         [uz * ux * cmin - uy * sang, uz * uy * cmin + ux * sang, cang + uz * uz * cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def Translation(delta, inverse=False):
    if inverse:
        delta = Vector(-delta.x, -delta.y, -delta.z)
    T = [[1, 0, 0, delta.x],
         [0, 1, 0, delta.y],
         [0, 0, 1, delta.z],
         [0, 0, 0, 1]]
    return Matrix(T)


def Scale(x, y=None, z=None, inverse=False):
    if isinstance(x, Vector):
        sx, sy, sz = x.x, x.y, x.z
    elif _isgoodnum(x):
        sx = x
        if _isgoodnum(y) and _isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    else:
        raise InvalidGeometryError('bad scaling values passed to Scale')

    if inverse:
        if abs(sx) < epsilon or abs(sy) < epsilon or abs(sz) < epsilon:
            raise InvalidGeometryError('cannot invert a degenerate scale')
        sx = 1.0 / sx
        sy = 1.0 / sy
        sz = 1.0 / sz

    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)


def Basis(right, up, normal, origin=None):
    """change of basis from a local frame (``right``, ``up``,
    ``normal`` as the local X, Y, Z axes, placed at ``origin``) into
    world coordinates"""
    if origin is None:
        origin = Point.origin()
    B = [[right.x, up.x, normal.x, origin.x],
         [right.y, up.y, normal.y, origin.y],
         [right.z, up.z, normal.z, origin.z],
         [0, 0, 0, 1]]
    return Matrix(B)


def from_unit_circle_projection(center, major_axis, normal, minor_axis_ratio):
    """Matrix taking the unit circle in the local XY plane onto the
    ellipse described by ``center``, ``major_axis``, ``normal`` and
    ``minor_axis_ratio``.  Angle zero of the unit circle lands on the
    tip of the major axis."""
    n = normal.normalize()
    right = major_axis.normalize()
    if not right.is_orthogonal_to(n):
        raise InvalidGeometryError('ellipse normal must be orthogonal to its major axis')
    up = n.cross(right).normalize()
    rx = major_axis.length
    ry = rx * minor_axis_ratio
    return Basis(right, up, n, center).mul(Scale(rx, ry, 1.0))


def to_unit_circle_projection(center, major_axis, normal, minor_axis_ratio):
    """inverse of ``from_unit_circle_projection()``: world coordinates
    into the ellipse's unit-circle parameter space"""
    return from_unit_circle_projection(center, major_axis, normal, minor_axis_ratio).inverse()


def plane_projection(origin, normal, right=None):
    """Matrix taking world coordinates into the local coordinates of the
    plane through ``origin`` with ``normal``.  The local X axis is
    ``right`` (or the arbitrary-axis right vector of the normal); local
    Z is the signed distance from the plane."""
    n = normal.normalize()
    if right is None:
        right = Vector.right_vector_from_normal(n)
    else:
        right = right.normalize()
        if not right.is_orthogonal_to(n):
            raise InvalidGeometryError('plane right vector must be orthogonal to its normal')
    up = n.cross(right).normalize()
    # the basis is orthonormal, so its transpose is its inverse
    rotation = Matrix(Basis(right, up, n), trans=True)
    return rotation.mul(Translation(origin.as_vector(), inverse=True))


def placement(angle, pivot, offset):
    """Rotation by ``angle`` degrees about ``pivot`` (Z axis) followed by
    a translation by ``offset``.  The order is fixed: rotation first,
    translation second."""
    about = Translation(pivot.as_vector()).mul(
        Rotation(Vector.z_axis(), angle)).mul(
            Translation(pivot.as_vector(), inverse=True))
    return Translation(offset).mul(about)


__all__ = [
    "Matrix",
    "Identity",
    "Rotation",
    "Translation",
    "Scale",
    "Basis",
    "from_unit_circle_projection",
    "to_unit_circle_projection",
    "plane_projection",
    "placement",
]
