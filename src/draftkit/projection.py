"""Projection of entities onto a 2D view or plot plane.

``project(entity, layer, matrix)`` pushes an entity through a 4x4
world-to-device matrix (usually ``ViewPort.transformation_matrix()``)
and returns a ``Projected*`` value that a renderer or plotter can draw
without any further 3D math.  Every projected value keeps the original
entity and its layer, so colors can be resolved late, at draw time.

Conics stay conics under an affine map.  A circle, arc or ellipse with
center ``c`` and axis vectors ``a`` (major) and ``b`` (minor) traces
``c + a cos(t) + b sin(t)``; after projection its 2D shape is read off
the singular value decomposition of the 2x2 matrix ``[a b]``: the
singular values are the new radii and the left singular vectors the
new axes.  Arc end angles are measured again in the projected
ellipse's own parameterization, and a mirroring projection swaps them
so that every projected arc still sweeps counter-clockwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from math import atan2, degrees, radians, cos, sin
from typing import List, Optional, Tuple

import numpy as np

from draftkit import xform
from draftkit.color import AUTO, ColorMap, IndexedColor, RealColor, resolve_real_color
from draftkit.document import Drawing, Layer
from draftkit.entities import Entity, EntityKind
from draftkit.geom import Point, Vector, correct_angle, epsilon
from draftkit.viewport import ProjectionStyle, ViewPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectedEntity:
    """common part of every projected value"""

    original: Entity
    layer: Layer
    parent_color: IndexedColor = field(default=AUTO, kw_only=True)

    def resolve_color(self, color_map: ColorMap, default: Optional[RealColor] = None) -> RealColor:
        """entity color, else the enclosing aggregate's, else the
        layer's, else ``default`` (or the color map default)"""
        return resolve_real_color(color_map,
                                  (self.original.color, self.parent_color, self.layer.color),
                                  default)


@dataclass(frozen=True)
class ProjectedLine(ProjectedEntity):
    p1: Point
    p2: Point

    def translate(self, delta: Vector) -> ProjectedLine:
        return replace(self, p1=self.p1 + delta, p2=self.p2 + delta)


@dataclass(frozen=True)
class ProjectedCircle(ProjectedEntity):
    """full circle or ellipse: ``radius_x`` along the direction
    ``rotation`` degrees from the X axis, ``radius_y`` across it"""

    center: Point
    radius_x: float
    radius_y: float
    rotation: float

    def placement(self) -> xform.Matrix:
        return xform.placement(self.rotation, Point.origin(), self.center.as_vector())

    def translate(self, delta: Vector) -> ProjectedCircle:
        return replace(self, center=self.center + delta)


@dataclass(frozen=True)
class ProjectedArc(ProjectedEntity):
    center: Point
    radius_x: float
    radius_y: float
    rotation: float
    start_angle: float
    end_angle: float
    start_point: Point
    end_point: Point

    def placement(self) -> xform.Matrix:
        return xform.placement(self.rotation, Point.origin(), self.center.as_vector())

    def translate(self, delta: Vector) -> ProjectedArc:
        return replace(self, center=self.center + delta,
                       start_point=self.start_point + delta,
                       end_point=self.end_point + delta)


@dataclass(frozen=True)
class ProjectedText(ProjectedEntity):
    location: Point
    height: float
    rotation: float
    value: str

    def placement(self) -> xform.Matrix:
        """text drawn at the origin along +X, rotated about its own
        location and then moved into place"""
        return xform.placement(self.rotation, Point.origin(), self.location.as_vector())

    def translate(self, delta: Vector) -> ProjectedText:
        return replace(self, location=self.location + delta)


@dataclass(frozen=True)
class ProjectedAggregate(ProjectedEntity):
    """children projected as though the group sat at the origin;
    ``location`` is the projected group offset"""

    location: Point
    children: Tuple[ProjectedEntity, ...]

    @property
    def offset(self) -> Vector:
        return self.location.as_vector()

    def translate(self, delta: Vector) -> ProjectedAggregate:
        return replace(self, location=self.location + delta)

    def flatten(self) -> List[ProjectedEntity]:
        """children with the group offset applied, nested groups
        flattened too"""
        result = []
        for child in self.children:
            child = child.translate(self.offset)
            if isinstance(child, ProjectedAggregate):
                result.extend(child.flatten())
            else:
                result.append(child)
        return result


def _conic_shape(center, major, minor, m):
    """projected center, radii, rotation, the orthogonal map from the
    old parameterization to the new, and whether it mirrors"""
    c = m.mul(center)
    a = m.mul(major)
    b = m.mul(minor)
    M = np.array([[a.x, b.x], [a.y, b.y]])
    U, S, Vt = np.linalg.svd(M)
    if np.linalg.det(U) < 0:
        U[:, 1] *= -1.0
        Vt[1, :] *= -1.0
    rotation = correct_angle(degrees(atan2(U[1, 0], U[0, 0])))
    mirrored = np.linalg.det(M) < 0
    return Point(c.x, c.y, 0.0), float(S[0]), float(S[1]), rotation, Vt, mirrored


def _param_angle(Vt, phi):
    """projected-ellipse parameter angle of old parameter angle ``phi``"""
    rad = radians(phi)
    v = Vt.dot(np.array([cos(rad), sin(rad)]))
    return correct_angle(degrees(atan2(v[1], v[0])))


def _project_conic(entity, layer, m, parent_color, bounded):
    prim = entity.primitives[0]
    center, rx, ry, rotation, Vt, mirrored = _conic_shape(
        prim.center, prim.major_axis, prim.minor_axis, m)
    if ry < epsilon:
        logger.debug("entity %s projects edge-on and is skipped", entity.id)
        return None
    if not bounded:
        return ProjectedCircle(entity, layer, center, rx, ry, rotation,
                               parent_color=parent_color)
    if prim.is_closed:
        start, end = 0.0, 360.0
    else:
        start = _param_angle(Vt, prim.start_angle)
        end = _param_angle(Vt, prim.end_angle)
        if mirrored:
            start, end = end, start
    start_point = m.mul(prim.start_point)
    end_point = m.mul(prim.end_point)
    if mirrored:
        start_point, end_point = end_point, start_point
    return ProjectedArc(entity, layer, center, rx, ry, rotation, start, end,
                        Point(start_point.x, start_point.y, 0.0),
                        Point(end_point.x, end_point.y, 0.0),
                        parent_color=parent_color)


def _flat(p: Point) -> Point:
    return Point(p.x, p.y, 0.0)


def project(entity: Entity, layer: Layer, m: xform.Matrix,
            parent_color: IndexedColor = AUTO) -> Optional[ProjectedEntity]:
    """Project ``entity`` (drawn on ``layer``) through ``m``.  Returns
    ``None`` for entities with nothing to draw in 2D."""
    kind = entity.kind
    if kind == EntityKind.LINE:
        return ProjectedLine(entity, layer, _flat(m.mul(entity.p1)), _flat(m.mul(entity.p2)),
                             parent_color=parent_color)
    elif kind == EntityKind.CIRCLE:
        return _project_conic(entity, layer, m, parent_color, bounded=False)
    elif kind == EntityKind.ARC:
        return _project_conic(entity, layer, m, parent_color, bounded=True)
    elif kind == EntityKind.ELLIPSE:
        return _project_conic(entity, layer, m, parent_color, bounded=not entity.is_closed)
    elif kind == EntityKind.TEXT:
        rad = radians(entity.rotation)
        baseline = m.mul(Vector(cos(rad), sin(rad), 0.0))
        up = m.mul(Vector(-sin(rad), cos(rad), 0.0) * entity.height)
        return ProjectedText(entity, layer, _flat(m.mul(entity.location)),
                             Vector(up.x, up.y, 0.0).length,
                             correct_angle(degrees(atan2(baseline.y, baseline.x))),
                             entity.value, parent_color=parent_color)
    elif kind == EntityKind.POLYLINE:
        segments = tuple(
            ProjectedLine(entity, layer, _flat(m.mul(a)), _flat(m.mul(b)),
                          parent_color=parent_color)
            for a, b in zip(entity.points, entity.points[1:]))
        return ProjectedAggregate(entity, layer, Point.origin(), segments,
                                  parent_color=parent_color)
    elif kind == EntityKind.AGGREGATE:
        offset = m.mul(entity.location.as_vector())
        inherited = entity.color if not entity.color.is_auto else parent_color
        children = []
        for child in entity.children:
            projected = project(child, layer, m, inherited)
            if projected is not None:
                children.append(projected)
        return ProjectedAggregate(entity, layer, Point(offset.x, offset.y, 0.0),
                                  tuple(children), parent_color=parent_color)
    elif kind == EntityKind.LOCATION:
        logger.debug("location entities are not projected")
        return None
    raise ValueError('bad entity passed to project: {}'.format(entity))


def project_drawing(drawing: Drawing, viewport: ViewPort, width: float, height: float,
                    style: ProjectionStyle = ProjectionStyle.ORIGIN_TOP_LEFT
                    ) -> List[Tuple[Layer, List[ProjectedEntity]]]:
    """every entity of every visible layer, grouped by layer in name
    order"""
    m = viewport.transformation_matrix(width, height, style)
    groups = []
    for layer in drawing.get_layers():
        if not layer.is_visible:
            continue
        projected = [p for p in (project(e, layer, m) for e in layer.get_entities())
                     if p is not None]
        groups.append((layer, projected))
    return groups


def show_all_viewport(drawing: Drawing, width: float, height: float,
                      sight: Optional[Vector] = None, up: Optional[Vector] = None,
                      pixel_buffer: float = 20.0) -> ViewPort:
    """the view port that fits every visible entity of ``drawing``"""
    return ViewPort.fit(drawing.get_extents(), width, height, sight, up, pixel_buffer)


def resolve_color(projected: ProjectedEntity, color_map: ColorMap,
                  default: Optional[RealColor] = None) -> RealColor:
    return projected.resolve_color(color_map, default)


__all__ = [
    "ProjectedEntity",
    "ProjectedLine",
    "ProjectedCircle",
    "ProjectedArc",
    "ProjectedText",
    "ProjectedAggregate",
    "project",
    "project_drawing",
    "show_all_viewport",
    "resolve_color",
]
