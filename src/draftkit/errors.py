"""Exceptions raised by the draftkit drawing engine.

Ambiguous edits (an offset reference point lying on the geometry, a
trim with nothing to cut) and unsupported entity kinds are not errors:
those operations return ``None`` or empty results instead.
"""


class DraftError(Exception):
    """Base class for all draftkit errors."""


class InvalidGeometryError(DraftError, ValueError):
    """Geometry that cannot be constructed or evaluated.

    Raised for zero-length normalization, a normal that is not
    orthogonal to an ellipse's major axis, non-positive radii and
    singular transformation matrices.
    """


class EntityNotFoundError(DraftError, KeyError):
    """An entity or layer that the operation requires is not present."""


class DrawingIntegrityError(DraftError):
    """The drawing would violate one of its structural invariants."""


class ConfigurationError(DraftError, ValueError):
    """Malformed settings or color map configuration."""


__all__ = [
    "DraftError",
    "InvalidGeometryError",
    "EntityNotFoundError",
    "DrawingIntegrityError",
    "ConfigurationError",
]
