"""The draftkit entity model.

Entities are the user-facing objects of a drawing.  The variant set is
closed (see ``EntityKind``) and every entity is an immutable value:
``update()`` takes optional per-field overrides and returns a new
entity, never touching the receiver.  Each entity derives, as pure
functions of its own fields:

- ``primitives``: the shapes used for rendering and intersection,
- ``snap_points``: centers, quadrants, end and mid points,
- ``bounding_box``: the axis-aligned extent.

Every entity also carries an integer ``id`` handle, used as the storage
key inside a layer.  The handle does not take part in equality and a
fresh one is issued to every new entity, including ``update()``
results.
"""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import ClassVar, Tuple

from draftkit.color import AUTO, IndexedColor
from draftkit.errors import InvalidGeometryError
from draftkit.geom import (BoundingBox, Point, Vector, close, correct_angle, epsilon,
                           isfullsweep, midpoint)
from draftkit.primitives import (PrimitiveEllipse, PrimitiveLine,
                                 PrimitivePoint, PrimitiveText)
from draftkit.snap import center_point, end_point, mid_point, quadrant_point

_ids = itertools.count(1)


def _next_id() -> int:
    return next(_ids)


class EntityKind(enum.Enum):
    LINE = "line"
    CIRCLE = "circle"
    ARC = "arc"
    ELLIPSE = "ellipse"
    POLYLINE = "polyline"
    TEXT = "text"
    LOCATION = "location"
    AGGREGATE = "aggregate"


def _angles_close(a, b):
    return close(correct_angle(a), correct_angle(b))


def _check_normal(normal):
    if normal.is_zero_vector:
        raise InvalidGeometryError('zero-length normal vector')


def _check_radius(radius):
    if not radius > 0.0:
        raise InvalidGeometryError('radius must be positive: {}'.format(radius))


@dataclass(frozen=True)
class Entity:
    """Base class for draftkit entities."""

    kind: ClassVar[EntityKind]

    id: int = field(default_factory=_next_id, init=False, compare=False, repr=False)

    def _make_primitives(self):
        raise NotImplementedError

    def _make_snap_points(self):
        raise NotImplementedError

    @cached_property
    def primitives(self) -> tuple:
        return tuple(self._make_primitives())

    @cached_property
    def snap_points(self) -> tuple:
        return tuple(self._make_snap_points())

    @cached_property
    def bounding_box(self) -> BoundingBox:
        box = BoundingBox.includes(p.bounding_box() for p in self.primitives)
        if box is None:
            raise InvalidGeometryError('entity has no extent: {}'.format(self))
        return box

    def update(self, **overrides):
        """new entity with the given fields replaced"""
        return replace(self, **overrides)

    def equivalent_to(self, other) -> bool:
        """geometric equality, tolerant of floating point noise"""
        raise NotImplementedError


@dataclass(frozen=True)
class Line(Entity):
    kind: ClassVar[EntityKind] = EntityKind.LINE

    p1: Point = field(default_factory=Point.origin)
    p2: Point = field(default_factory=Point.origin)
    color: IndexedColor = AUTO

    def __post_init__(self):
        if self.p1.close_to(self.p2):
            raise InvalidGeometryError('zero-length line at {}'.format(self.p1))

    def _make_primitives(self):
        return [PrimitiveLine(self.p1, self.p2, self.color)]

    def _make_snap_points(self):
        return [end_point(self.p1), end_point(self.p2),
                mid_point(midpoint(self.p1, self.p2))]

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Line) or self.color != other.color:
            return False
        return (self.p1.close_to(other.p1) and self.p2.close_to(other.p2)) or \
            (self.p1.close_to(other.p2) and self.p2.close_to(other.p1))


@dataclass(frozen=True)
class Circle(Entity):
    kind: ClassVar[EntityKind] = EntityKind.CIRCLE

    center: Point = field(default_factory=Point.origin)
    radius: float = 1.0
    normal: Vector = field(default_factory=Vector.z_axis)
    color: IndexedColor = AUTO

    def __post_init__(self):
        _check_radius(self.radius)
        _check_normal(self.normal)

    def _make_primitives(self):
        return [PrimitiveEllipse.circle(self.center, self.radius, self.normal,
                                        color=self.color)]

    def _make_snap_points(self):
        prim = self.primitives[0]
        return [center_point(self.center)] + \
            [quadrant_point(prim.point_at_angle(a)) for a in (0.0, 90.0, 180.0, 270.0)]

    def unit_circle_projection(self):
        return self.primitives[0].unit_circle_projection()

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Circle) or self.color != other.color:
            return False
        return self.center.close_to(other.center) and \
            close(self.radius, other.radius) and \
            self.normal.is_parallel_to(other.normal)


@dataclass(frozen=True)
class Arc(Entity):
    kind: ClassVar[EntityKind] = EntityKind.ARC

    center: Point = field(default_factory=Point.origin)
    radius: float = 1.0
    start_angle: float = 0.0
    end_angle: float = 360.0
    normal: Vector = field(default_factory=Vector.z_axis)
    color: IndexedColor = AUTO

    def __post_init__(self):
        _check_radius(self.radius)
        _check_normal(self.normal)

    def _make_primitives(self):
        return [PrimitiveEllipse.circle(self.center, self.radius, self.normal,
                                        self.start_angle, self.end_angle, self.color)]

    def _make_snap_points(self):
        prim = self.primitives[0]
        return [center_point(self.center), end_point(prim.start_point),
                end_point(prim.end_point), mid_point(prim.mid_point)]

    def unit_circle_projection(self):
        return self.primitives[0].unit_circle_projection()

    @property
    def start_point(self) -> Point:
        return self.primitives[0].start_point

    @property
    def end_point(self) -> Point:
        return self.primitives[0].end_point

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Arc) or self.color != other.color:
            return False
        return self.center.close_to(other.center) and \
            close(self.radius, other.radius) and \
            self.normal.normalize().close_to(other.normal.normalize()) and \
            _angles_close(self.start_angle, other.start_angle) and \
            _angles_close(self.end_angle, other.end_angle)


@dataclass(frozen=True)
class Ellipse(Entity):
    kind: ClassVar[EntityKind] = EntityKind.ELLIPSE

    center: Point = field(default_factory=Point.origin)
    major_axis: Vector = field(default_factory=Vector.x_axis)
    minor_axis_ratio: float = 1.0
    start_angle: float = 0.0
    end_angle: float = 360.0
    normal: Vector = field(default_factory=Vector.z_axis)
    color: IndexedColor = AUTO

    def __post_init__(self):
        _check_normal(self.normal)
        if self.major_axis.is_zero_vector:
            raise InvalidGeometryError('zero-length ellipse major axis')
        if not self.major_axis.normalize().is_orthogonal_to(self.normal.normalize()):
            raise InvalidGeometryError('ellipse normal must be orthogonal to its major axis')
        if not 0.0 < self.minor_axis_ratio <= 1.0 + epsilon:
            raise InvalidGeometryError('bad minor axis ratio: {}'.format(self.minor_axis_ratio))

    @property
    def is_closed(self) -> bool:
        return isfullsweep(self.start_angle, self.end_angle)

    def _make_primitives(self):
        return [PrimitiveEllipse(self.center, self.major_axis, self.normal,
                                 self.minor_axis_ratio, self.start_angle,
                                 self.end_angle, self.color)]

    def _make_snap_points(self):
        prim = self.primitives[0]
        if self.is_closed:
            return [center_point(self.center)] + \
                [quadrant_point(prim.point_at_angle(a)) for a in (0.0, 90.0, 180.0, 270.0)]
        return [center_point(self.center), end_point(prim.start_point),
                end_point(prim.end_point), mid_point(prim.mid_point)]

    def unit_circle_projection(self):
        return self.primitives[0].unit_circle_projection()

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Ellipse) or self.color != other.color:
            return False
        if not (self.center.close_to(other.center)
                and close(self.minor_axis_ratio, other.minor_axis_ratio)
                and self.normal.normalize().close_to(other.normal.normalize())):
            return False
        if self.major_axis.close_to(other.major_axis):
            shift = 0.0
        elif self.major_axis.close_to(-other.major_axis):
            # the same curve, parameterized from the opposite tip
            shift = 180.0
        else:
            return False
        if self.is_closed and other.is_closed:
            return True
        return _angles_close(self.start_angle, other.start_angle + shift) and \
            _angles_close(self.end_angle, other.end_angle + shift)


@dataclass(frozen=True)
class Polyline(Entity):
    kind: ClassVar[EntityKind] = EntityKind.POLYLINE

    points: Tuple[Point, ...] = ()
    color: IndexedColor = AUTO

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))
        if len(self.points) < 2:
            raise InvalidGeometryError('polyline requires at least two points')

    def _make_primitives(self):
        return [PrimitiveLine(a, b, self.color)
                for a, b in zip(self.points, self.points[1:])]

    def _make_snap_points(self):
        snaps = [end_point(p) for p in self.points]
        snaps += [mid_point(midpoint(a, b)) for a, b in zip(self.points, self.points[1:])]
        return snaps

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Polyline) or self.color != other.color:
            return False
        if len(self.points) != len(other.points):
            return False

        def same(xs, ys):
            return all(a.close_to(b) for a, b in zip(xs, ys))

        return same(self.points, other.points) or \
            same(self.points, tuple(reversed(other.points)))


@dataclass(frozen=True)
class Text(Entity):
    kind: ClassVar[EntityKind] = EntityKind.TEXT

    location: Point = field(default_factory=Point.origin)
    height: float = 1.0
    rotation: float = 0.0
    value: str = ""
    color: IndexedColor = AUTO

    def __post_init__(self):
        if not self.height > 0.0:
            raise InvalidGeometryError('text height must be positive: {}'.format(self.height))

    def _make_primitives(self):
        return [PrimitiveText(self.location, self.height, self.rotation,
                              self.value, self.color)]

    def _make_snap_points(self):
        return [end_point(self.location)]

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Text) or self.color != other.color:
            return False
        return self.location.close_to(other.location) and \
            close(self.height, other.height) and \
            _angles_close(self.rotation, other.rotation) and \
            self.value == other.value


@dataclass(frozen=True)
class Location(Entity):
    """a single point in the drawing"""

    kind: ClassVar[EntityKind] = EntityKind.LOCATION

    point: Point = field(default_factory=Point.origin)
    color: IndexedColor = AUTO

    def _make_primitives(self):
        return [PrimitivePoint(self.point, self.color)]

    def _make_snap_points(self):
        return [end_point(self.point)]

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Location) or self.color != other.color:
            return False
        return self.point.close_to(other.point)


@dataclass(frozen=True)
class Aggregate(Entity):
    """Group of child entities translated by ``location``.

    Children with an auto color inherit the aggregate's color.
    """

    kind: ClassVar[EntityKind] = EntityKind.AGGREGATE

    location: Point = field(default_factory=Point.origin)
    children: Tuple[Entity, ...] = ()
    color: IndexedColor = AUTO

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))
        if not self.children:
            raise InvalidGeometryError('aggregate requires at least one child')

    @property
    def offset(self) -> Vector:
        return self.location.as_vector()

    def _make_primitives(self):
        prims = []
        for child in self.children:
            for prim in child.primitives:
                prim = prim.translate(self.offset)
                if prim.color.is_auto:
                    prim = prim.with_color(self.color)
                prims.append(prim)
        return prims

    def _make_snap_points(self):
        return [snap.translate(self.offset)
                for child in self.children for snap in child.snap_points]

    def equivalent_to(self, other) -> bool:
        if not isinstance(other, Aggregate) or self.color != other.color:
            return False
        if len(self.children) != len(other.children):
            return False
        return self.location.close_to(other.location) and \
            all(a.equivalent_to(b) for a, b in zip(self.children, other.children))


__all__ = [
    "EntityKind",
    "Entity",
    "Line",
    "Circle",
    "Arc",
    "Ellipse",
    "Polyline",
    "Text",
    "Location",
    "Aggregate",
]
