"""Snap points: geometrically significant points exposed for selection
assistance."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from draftkit.geom import Point, Vector


class SnapPointKind(enum.Enum):
    CENTER = "center"
    QUADRANT = "quadrant"
    END_POINT = "end_point"
    MID_POINT = "mid_point"


@dataclass(frozen=True)
class SnapPoint:
    point: Point
    kind: SnapPointKind

    def translate(self, delta: Vector) -> SnapPoint:
        return replace(self, point=self.point + delta)


def center_point(p: Point) -> SnapPoint:
    return SnapPoint(p, SnapPointKind.CENTER)


def quadrant_point(p: Point) -> SnapPoint:
    return SnapPoint(p, SnapPointKind.QUADRANT)


def end_point(p: Point) -> SnapPoint:
    return SnapPoint(p, SnapPointKind.END_POINT)


def mid_point(p: Point) -> SnapPoint:
    return SnapPoint(p, SnapPointKind.MID_POINT)


__all__ = [
    "SnapPointKind",
    "SnapPoint",
    "center_point",
    "quadrant_point",
    "end_point",
    "mid_point",
]
