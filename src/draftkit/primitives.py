"""Geometric primitives.

Primitives are the minimal renderable and intersectable shapes derived
from entities: lines, ellipses (which also cover circles and arcs),
points and text.  They are immutable and carry their color so that
renderers can draw them without going back to the owning entity.

An ellipse primitive is parameterized through its unit-circle
projection: the matrix returned by ``from_unit_circle_projection()``
maps the unit circle in the local XY plane onto the ellipse, with
angle zero on the tip of the major axis.  Every angle measurement and
every inside/outside test on an ellipse goes through that space.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from functools import cached_property
from math import atan2, cos, degrees, radians, sin
from typing import ClassVar

from draftkit import xform
from draftkit.color import AUTO, IndexedColor
from draftkit.errors import InvalidGeometryError
from draftkit.geom import (BoundingBox, Point, Vector, angle_in_span,
                           close, correct_angle, dist,
                           epsilon, isfullsweep)


class PrimitiveKind(enum.Enum):
    LINE = "line"
    ELLIPSE = "ellipse"
    POINT = "point"
    TEXT = "text"


@dataclass(frozen=True)
class PrimitiveLine:
    """line segment from ``p1`` to ``p2``, parameterized over ``[0, 1]``"""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.LINE

    p1: Point
    p2: Point
    color: IndexedColor = AUTO

    @property
    def direction(self) -> Vector:
        return self.p2 - self.p1

    @property
    def length(self) -> float:
        return dist(self.p1, self.p2)

    def sample(self, u: float) -> Point:
        return self.p1 + self.direction * u

    def parameter_of(self, p: Point) -> float:
        """parameter of the point on the infinite line closest to ``p``"""
        d = self.direction
        ls = d.length_squared
        if ls < epsilon * epsilon:
            raise InvalidGeometryError('zero-length line has no parameterization')
        return (p - self.p1).dot(d) / ls

    def is_point_on(self, p: Point, inside: bool = True) -> bool:
        u = self.parameter_of(p)
        if inside and (u < -epsilon / self.length or u > 1.0 + epsilon / self.length):
            return False
        return self.sample(u).close_to(p)

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.p1, self.p2)

    def translate(self, delta: Vector) -> PrimitiveLine:
        return replace(self, p1=self.p1 + delta, p2=self.p2 + delta)

    def with_color(self, color: IndexedColor) -> PrimitiveLine:
        return replace(self, color=color)


@dataclass(frozen=True)
class PrimitiveEllipse:
    """ellipse, elliptical arc, circle or circular arc

    ``start_angle == 0 and end_angle == 360`` is a closed curve.  Angles
    are in degrees, measured in the unit-circle parameter space.
    """

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.ELLIPSE

    center: Point
    major_axis: Vector
    normal: Vector
    minor_axis_ratio: float = 1.0
    start_angle: float = 0.0
    end_angle: float = 360.0
    color: IndexedColor = AUTO

    def __post_init__(self):
        if self.major_axis.is_zero_vector:
            raise InvalidGeometryError('ellipse major axis must be non-zero')
        if self.normal.is_zero_vector:
            raise InvalidGeometryError('ellipse normal must be non-zero')
        if not self.major_axis.normalize().is_orthogonal_to(self.normal.normalize()):
            raise InvalidGeometryError('ellipse normal must be orthogonal to its major axis')
        if not 0.0 < self.minor_axis_ratio <= 1.0 + epsilon:
            raise InvalidGeometryError('bad minor axis ratio: {}'.format(self.minor_axis_ratio))

    @staticmethod
    def circle(center: Point, radius: float, normal: Vector,
               start_angle: float = 0.0, end_angle: float = 360.0,
               color: IndexedColor = AUTO) -> PrimitiveEllipse:
        """circle or circular arc whose angle zero is the right vector of
        ``normal``"""
        right = Vector.right_vector_from_normal(normal.normalize())
        return PrimitiveEllipse(center, right * radius, normal, 1.0,
                                start_angle, end_angle, color)

    @cached_property
    def _from_unit(self) -> xform.Matrix:
        return xform.from_unit_circle_projection(
            self.center, self.major_axis, self.normal, self.minor_axis_ratio)

    @cached_property
    def _to_unit(self) -> xform.Matrix:
        return self._from_unit.inverse()

    def from_unit_circle_projection(self) -> xform.Matrix:
        return self._from_unit

    def unit_circle_projection(self) -> xform.Matrix:
        """world coordinates into unit-circle parameter space"""
        return self._to_unit

    @property
    def is_closed(self) -> bool:
        return isfullsweep(self.start_angle, self.end_angle)

    @property
    def is_circular(self) -> bool:
        return close(self.minor_axis_ratio, 1.0)

    @property
    def radius_x(self) -> float:
        return self.major_axis.length

    @property
    def radius_y(self) -> float:
        return self.major_axis.length * self.minor_axis_ratio

    @property
    def minor_axis(self) -> Vector:
        up = self.normal.normalize().cross(self.major_axis.normalize())
        return up * self.radius_y

    def point_at_angle(self, ang: float) -> Point:
        rad = radians(ang)
        return self._from_unit.mul(Point(cos(rad), sin(rad), 0.0))

    def angle_of(self, p: Point) -> float:
        """angle of ``p`` in unit-circle parameter space, ``[0, 360)``"""
        u = self._to_unit.mul(p)
        return correct_angle(degrees(atan2(u.y, u.x)))

    def contains_angle(self, ang: float) -> bool:
        return angle_in_span(ang, self.start_angle, self.end_angle)

    @property
    def start_point(self) -> Point:
        return self.point_at_angle(self.start_angle)

    @property
    def end_point(self) -> Point:
        return self.point_at_angle(self.end_angle)

    @property
    def mid_point(self) -> Point:
        end = self.end_angle
        if end < self.start_angle:
            end += 360.0
        return self.point_at_angle((self.start_angle + end) / 2.0)

    def is_point_on(self, p: Point, inside: bool = True) -> bool:
        ang = self.angle_of(p)
        if inside and not self.contains_angle(ang):
            return False
        return self.point_at_angle(ang).close_to(p)

    def is_inside(self, p: Point) -> bool:
        """is ``p`` strictly inside the closed curve, as seen along the
        normal?"""
        u = self._to_unit.mul(p)
        return u.x * u.x + u.y * u.y < 1.0 - epsilon

    def bounding_box(self) -> BoundingBox:
        a = self.major_axis
        b = self.minor_axis
        angles = []
        for ai, bi in ((a.x, b.x), (a.y, b.y), (a.z, b.z)):
            if abs(ai) < epsilon and abs(bi) < epsilon:
                continue
            extreme = correct_angle(degrees(atan2(bi, ai)))
            angles.append(extreme)
            angles.append(correct_angle(extreme + 180.0))
        if not self.is_closed:
            angles = [x for x in angles if self.contains_angle(x)]
            angles += [self.start_angle, self.end_angle]
        if not angles:
            angles = [0.0]
        return BoundingBox.from_points(*[self.point_at_angle(x) for x in angles])

    def translate(self, delta: Vector) -> PrimitiveEllipse:
        return replace(self, center=self.center + delta)

    def with_color(self, color: IndexedColor) -> PrimitiveEllipse:
        return replace(self, color=color)


@dataclass(frozen=True)
class PrimitivePoint:
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.POINT

    location: Point
    color: IndexedColor = AUTO

    def is_point_on(self, p: Point, inside: bool = True) -> bool:
        return self.location.close_to(p)

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.location)

    def translate(self, delta: Vector) -> PrimitivePoint:
        return replace(self, location=self.location + delta)

    def with_color(self, color: IndexedColor) -> PrimitivePoint:
        return replace(self, color=color)


# glyph advance relative to text height, used for extents only
TEXT_WIDTH_FACTOR = 0.6


@dataclass(frozen=True)
class PrimitiveText:
    kind: ClassVar[PrimitiveKind] = PrimitiveKind.TEXT

    location: Point
    height: float
    rotation: float
    value: str
    color: IndexedColor = AUTO
    normal: Vector = field(default_factory=Vector.z_axis)

    @property
    def width(self) -> float:
        return self.height * TEXT_WIDTH_FACTOR * len(self.value)

    def corners(self) -> list[Point]:
        rad = radians(self.rotation)
        right = Vector(cos(rad), sin(rad), 0.0)
        up = Vector(-sin(rad), cos(rad), 0.0)
        p0 = self.location
        return [p0, p0 + right * self.width,
                p0 + right * self.width + up * self.height, p0 + up * self.height]

    def is_point_on(self, p: Point, inside: bool = True) -> bool:
        return False

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(*self.corners())

    def translate(self, delta: Vector) -> PrimitiveText:
        return replace(self, location=self.location + delta)

    def with_color(self, color: IndexedColor) -> PrimitiveText:
        return replace(self, color=color)


def is_point_on(prim, p: Point, inside: bool = True) -> bool:
    """does point ``p`` lie on primitive ``prim`` (within epsilon)?"""
    return prim.is_point_on(p, inside)


__all__ = [
    "PrimitiveKind",
    "PrimitiveLine",
    "PrimitiveEllipse",
    "PrimitivePoint",
    "PrimitiveText",
    "TEXT_WIDTH_FACTOR",
    "is_point_on",
]
