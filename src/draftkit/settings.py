"""Drawing settings and their YAML representation.

Settings files are small YAML mappings, for example::

    file_name: bracket.dxf
    drawing_plane:
      point: [0, 0, 0]
      normal: [0, 0, 1]
    unit_precision: 4
    angle_precision: 0

Every key is optional; missing keys take the ``DrawingSettings``
defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from draftkit.errors import ConfigurationError, InvalidGeometryError
from draftkit.geom import Point, Vector, correct_angle
from draftkit.viewport import Plane

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawingSettings:
    file_name: Optional[str] = None
    drawing_plane: Plane = field(default_factory=Plane.xy)
    unit_precision: int = 4
    angle_precision: int = 0

    def __post_init__(self):
        for name in ('unit_precision', 'angle_precision'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError('{} must be a non-negative integer: {!r}'.format(name, value))

    def update(self, **overrides) -> DrawingSettings:
        return replace(self, **overrides)

    def format_distance(self, value: float) -> str:
        return "{:.{}f}".format(value, self.unit_precision)

    def format_angle(self, value: float) -> str:
        return "{:.{}f}".format(correct_angle(value), self.angle_precision)


def _triple(data: Any, what: str):
    if not isinstance(data, (list, tuple)) or len(data) != 3:
        raise ConfigurationError('{} must be a list of three numbers: {!r}'.format(what, data))
    try:
        return tuple(float(c) for c in data)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError('{} must be a list of three numbers: {!r}'.format(what, data)) from exc


def settings_from_dict(data: Mapping) -> DrawingSettings:
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError('settings must be a mapping, got {}'.format(type(data).__name__))
    unknown = set(data) - {'file_name', 'drawing_plane', 'unit_precision', 'angle_precision'}
    if unknown:
        raise ConfigurationError('unknown settings keys: {}'.format(', '.join(sorted(map(str, unknown)))))

    kwargs: Dict[str, Any] = {}
    if data.get('file_name') is not None:
        kwargs['file_name'] = str(data['file_name'])
    if data.get('drawing_plane') is not None:
        plane = data['drawing_plane']
        if not isinstance(plane, Mapping):
            raise ConfigurationError('drawing_plane must be a mapping')
        point = Point(*_triple(plane.get('point', [0, 0, 0]), 'drawing_plane.point'))
        normal = Vector(*_triple(plane.get('normal', [0, 0, 1]), 'drawing_plane.normal'))
        try:
            kwargs['drawing_plane'] = Plane(point, normal)
        except InvalidGeometryError as exc:
            raise ConfigurationError('bad drawing plane: {}'.format(exc)) from exc
    for name in ('unit_precision', 'angle_precision'):
        if data.get(name) is not None:
            kwargs[name] = data[name]
    return DrawingSettings(**kwargs)


def settings_to_dict(settings: DrawingSettings) -> Dict[str, Any]:
    plane = settings.drawing_plane
    return {
        'file_name': settings.file_name,
        'drawing_plane': {
            'point': list(plane.point),
            'normal': list(plane.normal),
        },
        'unit_precision': settings.unit_precision,
        'angle_precision': settings.angle_precision,
    }


def load_settings(path) -> DrawingSettings:
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as fp:
            data = yaml.safe_load(fp)
    except yaml.YAMLError as exc:
        raise ConfigurationError('unable to parse settings file {}'.format(path)) from exc
    logger.debug("loaded drawing settings from %s", path)
    return settings_from_dict(data)


def save_settings(settings: DrawingSettings, path) -> Path:
    path = Path(path)
    with path.open('w', encoding='utf-8') as fp:
        yaml.safe_dump(settings_to_dict(settings), fp, sort_keys=False)
    logger.debug("saved drawing settings to %s", path)
    return path


__all__ = [
    "DrawingSettings",
    "settings_from_dict",
    "settings_to_dict",
    "load_settings",
    "save_settings",
]
