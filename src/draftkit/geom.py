## foundational geometric value types for draftkit
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

"""foundational geometric value types for **draftkit**

====================
OVERVIEW
====================

The draftkit.geom module provides the scalar, angle, point, vector and
bounding box building blocks used by every other part of the drawing
engine.

constants
=========

draftkit.geom provides the "constants" ``epsilon`` and ``pi2`` (2*pi).
Redefine these at your peril.  ``epsilon`` is used for every "close
to" test in the engine: proximity, angle wrap-around, zero vectors.

points and vectors
==================

A ``Point`` is an absolute position and a ``Vector`` is a direction or
displacement.  Both are immutable three-component values.  Exact
equality (``==``) compares components exactly; use ``close_to()`` when
floating point noise matters.  The arithmetic follows the usual affine
rules: ::

   p = Point(1, 2, 0)
   v = Point(4, 6, 0) - p          # Vector(3, 4, 0)
   q = p + v * 0.5                 # Point(2.5, 4, 0)
   v.length                        # 5.0

angles
======

Angles are specified in degrees and are right-handed, which is to say
a positive angle specifies a counter-clockwise sweep.  The canonical
range of an angle is ``[0, 360)``, see ``correct_angle()``.  Angular
spans follow the arc convention: a span runs counter-clockwise from
``start`` to ``end``, and ``start == 0 and end == 360`` is a full
sweep.

bounding boxes
==============

A ``BoundingBox`` is an axis-aligned min/max pair of points, derivable
from any set of points with ``BoundingBox.from_points()``.

"""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, acos, degrees, pi, sqrt
from typing import Iterable

from draftkit.errors import InvalidGeometryError

## constants
epsilon = 0.000005
pi2 = 2.0 * pi


## operations on scalars
## -----------------------

def close(a, b):
    """ are two scalars the same within epsilon
    """
    return abs(a - b) < epsilon


def between_narrow(lo, hi, x):
    """is ``x`` strictly between ``lo`` and ``hi``, with both ends
    pulled in by epsilon"""
    if lo > hi:
        lo, hi = hi, lo
    return lo + epsilon < x < hi - epsilon


def correct_angle(ang):
    """map an angle in degrees onto the canonical ``[0, 360)`` interval"""
    ang = ang % 360.0
    if close(ang, 360.0):
        ang = 0.0
    return ang


def isfullsweep(start, end):
    """does the span ``start`` to ``end`` denote a closed curve?"""
    return close(start, 0.0) and close(end, 360.0)


def angle_in_span(ang, start, end):
    """is angle ``ang`` within the counter-clockwise span from ``start``
    to ``end`` (all in degrees), within epsilon?"""
    if isfullsweep(start, end):
        return True
    sweep = (end - start) % 360.0
    off = (ang - start) % 360.0
    return off <= sweep + epsilon or off >= 360.0 - epsilon


def sweep_angle(start, end):
    """the counter-clockwise sweep in degrees from ``start`` to ``end``"""
    if isfullsweep(start, end):
        return 360.0
    return (end - start) % 360.0


## points and vectors
## ------------------

@dataclass(frozen=True)
class Vector:
    """direction or displacement in three dimensions"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __mul__(self, c):
        return Vector(self.x * c, self.y * c, self.z * c)

    __rmul__ = __mul__

    def __truediv__(self, c):
        return Vector(self.x / c, self.y / c, self.z / c)

    def __neg__(self):
        return Vector(-self.x, -self.y, -self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def length(self) -> float:
        return sqrt(self.length_squared)

    @property
    def is_zero_vector(self) -> bool:
        return self.length_squared < epsilon * epsilon

    def normalize(self) -> Vector:
        """return the unit vector pointing the same way; fails fast on a
        zero vector"""
        m = self.length
        if m < epsilon:
            raise InvalidGeometryError('cannot normalize a zero-length vector')
        return self / m

    def cross(self, v: Vector) -> Vector:
        return Vector(self.y * v.z - self.z * v.y,
                      self.z * v.x - self.x * v.z,
                      self.x * v.y - self.y * v.x)

    def dot(self, v: Vector) -> float:
        return self.x * v.x + self.y * v.y + self.z * v.z

    def close_to(self, other: Vector) -> bool:
        return (self - other).length < epsilon

    def is_orthogonal_to(self, other: Vector) -> bool:
        return abs(self.dot(other)) < epsilon

    def is_parallel_to(self, other: Vector) -> bool:
        return self.cross(other).is_zero_vector

    def to_angle(self) -> float:
        """the angle of this vector in the XY plane, in degrees"""
        return correct_angle(degrees(atan2(self.y, self.x)))

    def as_point(self) -> Point:
        return Point(self.x, self.y, self.z)

    @staticmethod
    def angle_between(a: Vector, b: Vector) -> float:
        """angle between two vectors in degrees"""
        d = a.normalize().dot(b.normalize())
        d = max(-1.0, min(1.0, d))
        return degrees(acos(d))

    @staticmethod
    def x_axis() -> Vector:
        return Vector(1.0, 0.0, 0.0)

    @staticmethod
    def y_axis() -> Vector:
        return Vector(0.0, 1.0, 0.0)

    @staticmethod
    def z_axis() -> Vector:
        return Vector(0.0, 0.0, 1.0)

    @staticmethod
    def zero() -> Vector:
        return Vector(0.0, 0.0, 0.0)

    @staticmethod
    def right_vector_from_normal(normal: Vector) -> Vector:
        """Pick the in-plane "right" direction for a plane normal using a
        variant of the DXF arbitrary axis algorithm."""
        if normal.close_to(Vector.z_axis()) or normal.close_to(-Vector.z_axis()):
            return Vector.y_axis().cross(normal).normalize()
        return Vector.z_axis().cross(normal).normalize()

    def __str__(self):
        return vstr(self)


@dataclass(frozen=True)
class Point:
    """absolute position in three dimensions"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other):
        if isinstance(other, (Vector, Point)):
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __mul__(self, c):
        return Point(self.x * c, self.y * c, self.z * c)

    __rmul__ = __mul__

    def __truediv__(self, c):
        return Point(self.x / c, self.y / c, self.z / c)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def close_to(self, other: Point) -> bool:
        """approximate equality, to within epsilon"""
        return dist(self, other) < epsilon

    def as_vector(self) -> Vector:
        return Vector(self.x, self.y, self.z)

    @staticmethod
    def origin() -> Point:
        return Point(0.0, 0.0, 0.0)

    def __str__(self):
        return vstr(self)


def dist(a, b):
    """ compute the euclidean distance between two points ``a`` and ``b``"""
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return sqrt(dx * dx + dy * dy + dz * dz)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0, (a.z + b.z) / 2.0)


def unique_points(points: Iterable[Point]) -> list[Point]:
    """drop points that lie within epsilon of an earlier point, keeping
    the original order"""
    result: list[Point] = []
    for p in points:
        if not any(p.close_to(q) for q in result):
            result.append(p)
    return result


# pretty printing string formatter for points and vectors.  Points
# that fall into the z=0 plane are formatted as though they were 2D.
def vstr(a):
    """ utility function for compact formatting of points and vectors
    """
    if not isinstance(a, (Point, Vector)):
        return str(a)
    if abs(a.z) > epsilon:
        return "[{}, {}, {}]".format(a.x, a.y, a.z)
    return "[{}, {}]".format(a.x, a.y)


## bounding boxes
## --------------

@dataclass(frozen=True)
class BoundingBox:
    """axis-aligned box spanning ``min_point`` to ``max_point``"""

    min_point: Point
    max_point: Point

    @staticmethod
    def from_points(*points: Point) -> BoundingBox:
        if len(points) == 1 and not isinstance(points[0], Point):
            points = tuple(points[0])
        if not points:
            raise InvalidGeometryError('bounding box requires at least one point')
        return BoundingBox(
            Point(min(p.x for p in points), min(p.y for p in points), min(p.z for p in points)),
            Point(max(p.x for p in points), max(p.y for p in points), max(p.z for p in points)))

    @staticmethod
    def includes(boxes: Iterable[BoundingBox]) -> BoundingBox | None:
        """smallest box containing every box in ``boxes``, or ``None``
        when there are none"""
        result = None
        for b in boxes:
            result = b if result is None else result.union(b)
        return result

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox.from_points(self.min_point, self.max_point,
                                       other.min_point, other.max_point)

    @property
    def size(self) -> Vector:
        return self.max_point - self.min_point

    @property
    def center(self) -> Point:
        return midpoint(self.min_point, self.max_point)

    def contains(self, p: Point) -> bool:
        """ does point ``p`` lie inside (within epsilon of) the box?"""
        lo = self.min_point
        hi = self.max_point
        return lo.x - epsilon <= p.x <= hi.x + epsilon and \
            lo.y - epsilon <= p.y <= hi.y + epsilon and \
            lo.z - epsilon <= p.z <= hi.z + epsilon

    def intersects(self, other: BoundingBox) -> bool:
        return self.min_point.x <= other.max_point.x + epsilon and \
            other.min_point.x <= self.max_point.x + epsilon and \
            self.min_point.y <= other.max_point.y + epsilon and \
            other.min_point.y <= self.max_point.y + epsilon and \
            self.min_point.z <= other.max_point.z + epsilon and \
            other.min_point.z <= self.max_point.z + epsilon

    def translate(self, delta: Vector) -> BoundingBox:
        return BoundingBox(self.min_point + delta, self.max_point + delta)


__all__ = [
    "epsilon",
    "pi2",
    "close",
    "between_narrow",
    "correct_angle",
    "isfullsweep",
    "angle_in_span",
    "sweep_angle",
    "Vector",
    "Point",
    "dist",
    "midpoint",
    "unique_points",
    "vstr",
    "BoundingBox",
]
