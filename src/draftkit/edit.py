"""Rigid and scaling edits of entities, and applying edit results to a
drawing.

All edits return new entities; nothing is modified in place.  Rotation
is about the Z axis through a given origin, with positive angles
counter-clockwise.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from draftkit import xform
from draftkit.entities import Entity, EntityKind
from draftkit.errors import InvalidGeometryError
from draftkit.geom import Point, Vector, correct_angle, isfullsweep
from draftkit.primitives import PrimitiveEllipse

logger = logging.getLogger(__name__)


def move(entity: Entity, delta: Vector) -> Entity:
    kind = entity.kind
    if kind == EntityKind.LINE:
        return entity.update(p1=entity.p1 + delta, p2=entity.p2 + delta)
    elif kind in (EntityKind.CIRCLE, EntityKind.ARC, EntityKind.ELLIPSE):
        return entity.update(center=entity.center + delta)
    elif kind == EntityKind.POLYLINE:
        return entity.update(points=tuple(p + delta for p in entity.points))
    elif kind == EntityKind.TEXT:
        return entity.update(location=entity.location + delta)
    elif kind == EntityKind.LOCATION:
        return entity.update(point=entity.point + delta)
    elif kind == EntityKind.AGGREGATE:
        return entity.update(location=entity.location + delta)
    raise ValueError('bad entity passed to move: {}'.format(entity))


def _rotated_arc_angles(entity, m, center, normal):
    if isfullsweep(entity.start_angle, entity.end_angle):
        return entity.start_angle, entity.end_angle
    old = entity.primitives[0]
    new = PrimitiveEllipse.circle(center, entity.radius, normal)
    # the zero angle of an arc follows its normal, so measure again
    return new.angle_of(m.mul(old.start_point)), new.angle_of(m.mul(old.end_point))


def _transform_rigid(entity, m, angle):
    kind = entity.kind
    if kind == EntityKind.LINE:
        return entity.update(p1=m.mul(entity.p1), p2=m.mul(entity.p2))
    elif kind == EntityKind.CIRCLE:
        return entity.update(center=m.mul(entity.center), normal=m.mul(entity.normal))
    elif kind == EntityKind.ARC:
        center = m.mul(entity.center)
        normal = m.mul(entity.normal)
        start, end = _rotated_arc_angles(entity, m, center, normal)
        return entity.update(center=center, normal=normal, start_angle=start, end_angle=end)
    elif kind == EntityKind.ELLIPSE:
        return entity.update(center=m.mul(entity.center),
                             major_axis=m.mul(entity.major_axis),
                             normal=m.mul(entity.normal))
    elif kind == EntityKind.POLYLINE:
        return entity.update(points=tuple(m.mul(p) for p in entity.points))
    elif kind == EntityKind.TEXT:
        return entity.update(location=m.mul(entity.location),
                             rotation=correct_angle(entity.rotation + angle))
    elif kind == EntityKind.LOCATION:
        return entity.update(point=m.mul(entity.point))
    raise ValueError('bad entity passed to rotate: {}'.format(entity))


def rotate(entity: Entity, origin: Point, angle: float) -> Entity:
    """rotate ``entity`` by ``angle`` degrees about the Z axis through
    ``origin``"""
    if entity.kind == EntityKind.AGGREGATE:
        # children are relative to the aggregate location
        children = tuple(rotate(child, Point.origin(), angle) for child in entity.children)
        location = xform.placement(angle, origin, Vector.zero()).mul(entity.location)
        return entity.update(location=location, children=children)
    return _transform_rigid(entity, xform.placement(angle, origin, Vector.zero()), angle)


def scale(entity: Entity, base: Point, factor: float) -> Entity:
    """uniformly scale ``entity`` about ``base``"""
    if not factor > 0.0:
        raise InvalidGeometryError('scale factor must be positive: {}'.format(factor))

    def about(p):
        return base + (p - base) * factor

    kind = entity.kind
    if kind == EntityKind.LINE:
        return entity.update(p1=about(entity.p1), p2=about(entity.p2))
    elif kind in (EntityKind.CIRCLE, EntityKind.ARC):
        return entity.update(center=about(entity.center), radius=entity.radius * factor)
    elif kind == EntityKind.ELLIPSE:
        return entity.update(center=about(entity.center), major_axis=entity.major_axis * factor)
    elif kind == EntityKind.POLYLINE:
        return entity.update(points=tuple(about(p) for p in entity.points))
    elif kind == EntityKind.TEXT:
        return entity.update(location=about(entity.location), height=entity.height * factor)
    elif kind == EntityKind.LOCATION:
        return entity.update(point=about(entity.point))
    elif kind == EntityKind.AGGREGATE:
        children = tuple(scale(child, Point.origin(), factor) for child in entity.children)
        return entity.update(location=about(entity.location), children=children)
    raise ValueError('bad entity passed to scale: {}'.format(entity))


def apply_edit(drawing, removed: Iterable[Entity], added: Iterable[Entity],
               layer_name: Optional[str] = None):
    """Remove every entity in ``removed`` and add every entity in
    ``added``.  Additions go to ``layer_name`` if given, else to the
    layer that held the first removed entity, else to the current
    layer."""
    for entity in removed:
        if layer_name is None:
            layer = drawing.containing_layer(entity)
            if layer is not None:
                layer_name = layer.name
        drawing = drawing.remove_entity(entity)
    added = tuple(added)
    if added:
        logger.debug("adding %d entities to layer %s", len(added),
                     drawing.current_layer_name if layer_name is None else layer_name)
    for entity in added:
        drawing = drawing.add_entity(entity, layer_name)
    return drawing


__all__ = [
    "move",
    "rotate",
    "scale",
    "apply_edit",
]
