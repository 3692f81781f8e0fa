"""Trim and extend.

Both operations take a ``SelectedEntity`` (the entity plus the point
where the user picked it) and a collection of boundary primitives, and
return a ``(removed, added)`` pair of entity tuples.  Applying the pair
to a drawing (see ``draftkit.edit.apply_edit``) performs the edit.  An
edit that cannot be decided returns ``((), ())``.

trim
====

The selected entity is cut at its intersections with the boundary,
and the piece under the pick is dropped:

- lines keep the pieces from P1 to the nearest cut before the pick and
  from the nearest cut after the pick to P2,
- circles and closed ellipses become an arc (or bounded ellipse) from
  the first cut after the pick round to the last cut before it,
- arcs and bounded ellipses shorten from either end independently.

Angles on conics are measured through the unit-circle projection, so
ellipses trim exactly like circles do.

extend
======

The end of a line or arc nearest the pick grows outward until it meets
the nearest boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from draftkit.entities import Arc, Entity, EntityKind
from draftkit.geom import Point, between_narrow, close, correct_angle, dist, epsilon
from draftkit.intersect import intersect_primitives, intersection_points

logger = logging.getLogger(__name__)

EditResult = Tuple[Tuple[Entity, ...], Tuple[Entity, ...]]

_NO_OP: EditResult = ((), ())


@dataclass(frozen=True)
class SelectedEntity:
    entity: Entity
    selection_point: Point


def trim(selected: SelectedEntity, boundary_primitives: Iterable) -> EditResult:
    entity = selected.entity
    points = intersect_primitives(entity.primitives, list(boundary_primitives))
    if not points:
        logger.debug("nothing to trim: entity %s does not meet the boundary", entity.id)
        return _NO_OP

    kind = entity.kind
    if kind == EntityKind.LINE:
        return _trim_line(entity, selected.selection_point, points)
    elif kind in (EntityKind.CIRCLE, EntityKind.ARC, EntityKind.ELLIPSE):
        return _trim_conic(entity, selected.selection_point, points)
    else:
        logger.debug("trim of %s entities is not supported", kind.value)
        return _NO_OP


def _trim_line(line, pick, points) -> EditResult:
    prim = line.primitives[0]
    # work along the line with the squared distance from P1
    pick = prim.sample(min(1.0, max(0.0, prim.parameter_of(pick))))

    def along(p):
        return (p - line.p1).length_squared

    sel = along(pick)
    length = along(line.p2)
    left = [p for p in points if between_narrow(0.0, sel, along(p))]
    right = [p for p in points if between_narrow(sel, length, along(p))]

    added = []
    if left:
        added.append(line.update(p2=max(left, key=along)))
    if right:
        added.append(line.update(p1=min(right, key=along)))
    if not added:
        logger.debug("no trim point on either side of the pick")
        return _NO_OP
    return (line,), tuple(added)


def _trim_conic(entity, pick, points) -> EditResult:
    prim = entity.primitives[0]
    angles = sorted(prim.angle_of(p) for p in points)
    sel = prim.angle_of(pick)

    if prim.is_closed:
        angles = _unique_angles(angles)
        if len(angles) < 2:
            logger.debug("a closed curve needs two cuts to trim")
            return _NO_OP
        before = len([a for a in angles if a < sel]) - 1
        if before < 0:
            before = len(angles) - 1
        after = (before + 1) % len(angles)
        start = angles[after]
        end = angles[before]
        if entity.kind == EntityKind.CIRCLE:
            added = Arc(entity.center, entity.radius, start, end, entity.normal, entity.color)
        else:
            added = entity.update(start_angle=start, end_angle=end)
        return (entity,), (added,)

    start = correct_angle(prim.start_angle)
    end = correct_angle(prim.end_angle)
    # cuts at the existing end points change nothing
    angles = [a for a in angles if not close(a, start) and not close(a, end)]
    if start > end:
        angles = [a - 360.0 if a >= start else a for a in angles]
        if sel >= start:
            sel -= 360.0
    lesser = [a for a in angles if a < sel]
    greater = [a for a in angles if a > sel]

    added = []
    if lesser:
        added.append(entity.update(end_angle=correct_angle(max(lesser))))
    if greater:
        added.append(entity.update(start_angle=correct_angle(min(greater))))
    if not added:
        logger.debug("no trim point on either side of the pick")
        return _NO_OP
    return (entity,), tuple(added)


def _unique_angles(angles):
    result = []
    for a in angles:
        if not result or not close(a, result[-1]):
            result.append(a)
    # 359.99999 and 0 are the same cut
    if len(result) > 1 and close(result[-1] - 360.0, result[0]):
        result.pop()
    return result


def extend(selected: SelectedEntity, boundary_primitives: Iterable) -> EditResult:
    entity = selected.entity
    boundary = list(boundary_primitives)
    kind = entity.kind
    if kind == EntityKind.LINE:
        return _extend_line(entity, selected.selection_point, boundary)
    elif kind == EntityKind.ARC or (kind == EntityKind.ELLIPSE and not entity.is_closed):
        return _extend_conic(entity, selected.selection_point, boundary)
    else:
        logger.debug("extend of %s entities is not supported", kind.value)
        return _NO_OP


def _unbounded_hits(prim, boundary):
    """intersections with the entity primitive unbounded and the
    boundary primitives bounded"""
    points = []
    for b in boundary:
        points.extend(p for p in intersection_points(prim, b, inside=False)
                      if b.is_point_on(p, inside=True))
    return points


def _extend_line(line, pick, boundary) -> EditResult:
    prim = line.primitives[0]
    params = [prim.parameter_of(p) for p in _unbounded_hits(prim, boundary)]
    tol = epsilon / prim.length
    if dist(pick, line.p1) <= dist(pick, line.p2):
        beyond = [u for u in params if u < -tol]
        if not beyond:
            logger.debug("no boundary beyond the start of the line")
            return _NO_OP
        return (line,), (line.update(p1=prim.sample(max(beyond))),)
    beyond = [u for u in params if u > 1.0 + tol]
    if not beyond:
        logger.debug("no boundary beyond the end of the line")
        return _NO_OP
    return (line,), (line.update(p2=prim.sample(min(beyond))),)


def _extend_conic(entity, pick, boundary) -> EditResult:
    prim = entity.primitives[0]
    angles = [prim.angle_of(p) for p in _unbounded_hits(prim, boundary)]
    angles = [a for a in angles if not prim.contains_angle(a)]
    if not angles:
        logger.debug("no boundary outside the span of the curve")
        return _NO_OP
    if dist(pick, prim.start_point) <= dist(pick, prim.end_point):
        # the start sweeps clockwise
        start = min(angles, key=lambda a: (prim.start_angle - a) % 360.0)
        return (entity,), (entity.update(start_angle=start),)
    end = min(angles, key=lambda a: (a - prim.end_angle) % 360.0)
    return (entity,), (entity.update(end_angle=end),)


__all__ = [
    "SelectedEntity",
    "EditResult",
    "trim",
    "extend",
]
