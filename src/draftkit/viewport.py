"""Display planes and view ports.

A ``ViewPort`` describes what part of the (3D) drawing is visible:
the world point that lands on the bottom-left corner of the view, the
sight vector (pointing from the scene toward the viewer), the up
vector and the height of the view in drawing units.  Combined with an
output size in pixels (or any other device unit) and a
``ProjectionStyle`` it yields the 4x4 matrix taking world coordinates
to device coordinates.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from draftkit import xform
from draftkit.errors import InvalidGeometryError
from draftkit.geom import BoundingBox, Point, Vector, epsilon


class ProjectionStyle(enum.Enum):
    ORIGIN_TOP_LEFT = "origin_top_left"
    """window coordinates; X grows right, Y grows down"""
    ORIGIN_BOTTOM_LEFT = "origin_bottom_left"
    """cartesian coordinates; X grows right, Y grows up"""
    ORIGIN_CENTER = "origin_center"
    """normalized coordinates in ``[-1, 1]`` with the origin in the middle"""


@dataclass(frozen=True)
class Plane:
    """the plane through ``point`` perpendicular to ``normal``"""

    point: Point = field(default_factory=Point.origin)
    normal: Vector = field(default_factory=Vector.z_axis)

    def __post_init__(self):
        if self.normal.is_zero_vector:
            raise InvalidGeometryError('plane normal must be non-zero')

    @staticmethod
    def xy() -> Plane:
        return Plane(Point.origin(), Vector.z_axis())

    @staticmethod
    def xz() -> Plane:
        return Plane(Point.origin(), Vector.y_axis())

    @staticmethod
    def yz() -> Plane:
        return Plane(Point.origin(), Vector.x_axis())

    def to_xy_plane_projection(self) -> xform.Matrix:
        """world coordinates into plane-local coordinates, with local Z
        the signed distance from the plane"""
        return xform.plane_projection(self.point, self.normal)

    def distance_to(self, p: Point) -> float:
        return (p - self.point).dot(self.normal.normalize())

    def contains(self, p: Point) -> bool:
        return abs(self.distance_to(p)) < epsilon


@dataclass(frozen=True)
class ViewPort:
    bottom_left: Point = field(default_factory=Point.origin)
    sight: Vector = field(default_factory=Vector.z_axis)
    up: Vector = field(default_factory=Vector.y_axis)
    view_height: float = 10.0

    def __post_init__(self):
        if self.sight.is_zero_vector or self.up.is_zero_vector:
            raise InvalidGeometryError('view port sight and up vectors must be non-zero')
        if self.sight.is_parallel_to(self.up):
            raise InvalidGeometryError('view port sight and up vectors must not be parallel')
        if not self.view_height > 0.0:
            raise InvalidGeometryError('view height must be positive: {}'.format(self.view_height))

    @staticmethod
    def top_view() -> ViewPort:
        return ViewPort(Point.origin(), Vector.z_axis(), Vector.y_axis(), 10.0)

    @property
    def right(self) -> Vector:
        return self.up.cross(self.sight).normalize()

    def update(self, **overrides) -> ViewPort:
        return replace(self, **overrides)

    def plane_projection(self) -> xform.Matrix:
        """world coordinates into view coordinates in drawing units, with
        the bottom-left corner of the view at the origin"""
        return xform.plane_projection(self.bottom_left, self.sight, self.right)

    def transformation_matrix(self, width: float, height: float,
                              style: ProjectionStyle = ProjectionStyle.ORIGIN_TOP_LEFT) -> xform.Matrix:
        """world coordinates into device coordinates for a view of
        ``width`` by ``height`` device units"""
        if width <= 0 or height <= 0:
            raise InvalidGeometryError('bad view size: {} x {}'.format(width, height))
        view = self.plane_projection()
        scale = height / self.view_height
        if style == ProjectionStyle.ORIGIN_BOTTOM_LEFT:
            device = xform.Scale(scale, scale, 1.0)
        elif style == ProjectionStyle.ORIGIN_TOP_LEFT:
            device = xform.Translation(Vector(0.0, height, 0.0)).mul(
                xform.Scale(scale, -scale, 1.0))
        elif style == ProjectionStyle.ORIGIN_CENTER:
            view_width = self.view_height * width / height
            device = xform.Translation(Vector(-1.0, -1.0, 0.0)).mul(
                xform.Scale(2.0 / view_width, 2.0 / self.view_height, 1.0))
        else:
            raise ValueError('unsupported projection style: {}'.format(style))
        return device.mul(view)

    @staticmethod
    def fit(extents: Optional[BoundingBox], width: float, height: float,
            sight: Optional[Vector] = None, up: Optional[Vector] = None,
            pixel_buffer: float = 20.0) -> ViewPort:
        """The view port along ``sight`` that shows all of ``extents`` in
        a ``width`` by ``height`` view, centered, keeping
        ``pixel_buffer`` device units free on every side.  ``None``
        extents give a default view looking at the origin."""
        sight = Vector.z_axis() if sight is None else sight
        up = Vector.y_axis() if up is None else up
        if extents is None:
            return ViewPort(Point.origin(), sight, up, 10.0)
        if width <= 0 or height <= 0:
            raise InvalidGeometryError('bad view size: {} x {}'.format(width, height))

        right = up.cross(sight).normalize()
        to_view = xform.plane_projection(Point.origin(), sight, right)
        corners = [to_view.mul(p) for p in _box_corners(extents)]
        min_x = min(p.x for p in corners)
        max_x = max(p.x for p in corners)
        min_y = min(p.y for p in corners)
        max_y = max(p.y for p in corners)
        content_width = max_x - min_x
        content_height = max_y - min_y

        if width > 2 * pixel_buffer and height > 2 * pixel_buffer:
            usable_width = width - 2 * pixel_buffer
            usable_height = height - 2 * pixel_buffer
        else:
            usable_width = width
            usable_height = height

        scales = []
        if content_width > epsilon:
            scales.append(usable_width / content_width)
        if content_height > epsilon:
            scales.append(usable_height / content_height)
        if scales:
            view_height = height / min(scales)
        else:
            view_height = 1.0
        view_width = view_height * width / height

        cx = (min_x + max_x) / 2.0
        cy = (min_y + max_y) / 2.0
        corner = Point(cx - view_width / 2.0, cy - view_height / 2.0, 0.0)
        bottom_left = to_view.inverse().mul(corner)
        return ViewPort(bottom_left, sight, up, view_height)


def _box_corners(box: BoundingBox) -> Iterable[Point]:
    lo = box.min_point
    hi = box.max_point
    for x in (lo.x, hi.x):
        for y in (lo.y, hi.y):
            for z in (lo.z, hi.z):
                yield Point(x, y, z)


__all__ = [
    "ProjectionStyle",
    "Plane",
    "ViewPort",
]
