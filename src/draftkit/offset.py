"""Offset: a copy of an entity moved a given distance toward the side of
a reference point.

Lines move perpendicular to themselves within the drawing plane.
Circles and arcs keep their center and grow or shrink, depending on
whether the reference point is outside or inside the curve as seen
through the curve's own unit-circle projection.  Anything else, or a
reference point that has no side, gives ``None``.
"""

from __future__ import annotations

import logging
from math import sqrt
from typing import Optional

from draftkit.entities import Entity, EntityKind
from draftkit.geom import Point, epsilon

logger = logging.getLogger(__name__)


def offset(drawing, entity: Entity, reference_point: Point, distance: float) -> Optional[Entity]:
    kind = entity.kind
    if kind == EntityKind.LINE:
        result = _offset_line(drawing, entity, reference_point, distance)
    elif kind in (EntityKind.CIRCLE, EntityKind.ARC):
        result = _offset_circle(entity, reference_point, distance)
    else:
        logger.debug("offset of %s entities is not supported", kind.value)
        return None
    if result is None:
        logger.debug("offset of entity %s has no side for %s", entity.id, reference_point)
    return result


def _offset_line(drawing, line, reference_point, distance):
    normal = drawing.settings.drawing_plane.normal.normalize()
    direction = line.p2 - line.p1
    if direction.is_zero_vector or direction.is_parallel_to(normal):
        return None
    if line.primitives[0].is_point_on(reference_point, inside=False):
        return None
    perp = normal.cross(direction).normalize()
    side = perp.dot(reference_point - line.p1)
    if abs(side) < epsilon:
        return None
    if side < 0.0:
        perp = -perp
    delta = perp * distance
    return line.update(p1=line.p1 + delta, p2=line.p2 + delta)


def _offset_circle(circle, reference_point, distance):
    u = circle.unit_circle_projection().mul(reference_point)
    # distance from the center in units of the radius, within the plane
    r = sqrt(u.x * u.x + u.y * u.y)
    if abs(r - 1.0) * circle.radius < epsilon:
        return None
    if r < 1.0:
        radius = circle.radius - distance
    else:
        radius = circle.radius + distance
    if radius <= epsilon:
        return None
    return circle.update(radius=radius)


__all__ = ["offset"]
