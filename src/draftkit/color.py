"""Indexed colors, real colors and color maps.

Entities and layers carry an ``IndexedColor``: either an explicit
palette index or the ``AUTO`` sentinel meaning "inherit from the
enclosing context".  Real RGB values are only decided at render or plot
time, through a ``ColorMap`` and ``resolve_color()``.
"""

from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

import yaml

from draftkit.errors import ConfigurationError

logger = logging.getLogger(__name__)

_AUTO_INDEX = -1


@dataclass(frozen=True)
class IndexedColor:
    """Palette index 0..255, or the auto sentinel."""

    index: int = _AUTO_INDEX

    def __post_init__(self):
        if self.index != _AUTO_INDEX and not 0 <= self.index <= 255:
            raise ConfigurationError('color index out of range: {}'.format(self.index))

    @property
    def is_auto(self) -> bool:
        return self.index == _AUTO_INDEX

    @staticmethod
    def auto() -> IndexedColor:
        return AUTO

    def __str__(self):
        return "auto" if self.is_auto else str(self.index)


AUTO = IndexedColor()


@dataclass(frozen=True)
class RealColor:
    """An ARGB color with byte components."""

    a: int
    r: int
    g: int
    b: int

    @staticmethod
    def from_rgb(r: int, g: int, b: int) -> RealColor:
        return RealColor(255, r, g, b)

    @staticmethod
    def from_argb(a: int, r: int, g: int, b: int) -> RealColor:
        return RealColor(a, r, g, b)

    @staticmethod
    def from_hex(text: str) -> RealColor:
        """parse ``#rrggbb`` or ``#aarrggbb``"""
        s = text.strip().lstrip('#')
        try:
            if len(s) == 6:
                return RealColor(255, int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
            if len(s) == 8:
                return RealColor(int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16), int(s[6:8], 16))
        except ValueError as exc:
            raise ConfigurationError('bad color string: {}'.format(text)) from exc
        raise ConfigurationError('bad color string: {}'.format(text))

    def to_color_string(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(self.r, self.g, self.b)


BLACK = RealColor.from_rgb(0, 0, 0)
WHITE = RealColor.from_rgb(255, 255, 255)

# the first nine index colors are fixed; 250-255 are a gray ramp
_STANDARD = {
    0: BLACK,
    1: RealColor.from_rgb(255, 0, 0),
    2: RealColor.from_rgb(255, 255, 0),
    3: RealColor.from_rgb(0, 255, 0),
    4: RealColor.from_rgb(0, 255, 255),
    5: RealColor.from_rgb(0, 0, 255),
    6: RealColor.from_rgb(255, 0, 255),
    7: WHITE,
    8: RealColor.from_rgb(128, 128, 128),
    9: RealColor.from_rgb(192, 192, 192),
}


def _default_palette() -> Dict[int, RealColor]:
    palette = dict(_STANDARD)
    # 10..249: 24 hues, each with five shades of two saturations
    for index in range(10, 250):
        hue = ((index - 10) // 10) * 15.0 / 360.0
        step = (index - 10) % 10
        value = (1.0, 0.8, 0.6, 0.5, 0.3)[step // 2]
        saturation = 1.0 if step % 2 == 0 else 0.5
        r, g, b = colorsys.hsv_to_rgb(hue, saturation, value)
        palette[index] = RealColor.from_rgb(round(r * 255), round(g * 255), round(b * 255))
    for index in range(250, 256):
        level = round(51 + (index - 250) * 204 / 5)
        palette[index] = RealColor.from_rgb(level, level, level)
    return palette


class ColorMap:
    """Mapping from indexed colors to real colors.

    Looking up ``AUTO`` yields the map's ``default`` color; indices not
    present in the map also fall back to it.
    """

    def __init__(self, colors: Optional[Mapping[int, RealColor]] = None,
                 default: RealColor = WHITE):
        self._colors = dict(_default_palette() if colors is None else colors)
        self.default = default

    def __getitem__(self, color: IndexedColor) -> RealColor:
        if color.is_auto:
            return self.default
        return self._colors.get(color.index, self.default)

    def __len__(self):
        return len(self._colors)

    def with_default(self, default: RealColor) -> ColorMap:
        return ColorMap(self._colors, default)

    @staticmethod
    def all_black() -> ColorMap:
        return ColorMap({i: BLACK for i in range(256)}, BLACK)

    @staticmethod
    def from_dict(data: Mapping) -> ColorMap:
        """Build a color map from a mapping such as::

            default: "#ffffff"
            colors:
              1: "#ff0000"
              7: "#000000"

        Indices not listed keep their default palette value.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError('color map must be a mapping')
        colors = _default_palette()
        for key, value in (data.get('colors') or {}).items():
            try:
                index = int(key)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError('bad color index: {}'.format(key)) from exc
            if not 0 <= index <= 255:
                raise ConfigurationError('color index out of range: {}'.format(index))
            colors[index] = RealColor.from_hex(str(value))
        default = WHITE
        if data.get('default') is not None:
            default = RealColor.from_hex(str(data['default']))
        return ColorMap(colors, default)

    @staticmethod
    def from_yaml(path) -> ColorMap:
        path = Path(path)
        with path.open('r', encoding='utf-8') as fp:
            try:
                data = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError('unable to parse color map {}'.format(path)) from exc
        logger.debug("loaded color map from %s", path)
        return ColorMap.from_dict(data)


def resolve_color(*candidates: IndexedColor, default: IndexedColor = AUTO) -> IndexedColor:
    """Walk an inheritance chain (for example entity, aggregate, layer)
    and return the first explicit color, or ``default``."""
    for color in candidates:
        if color is not None and not color.is_auto:
            return color
    return default


def resolve_real_color(color_map: ColorMap, candidates: Iterable[IndexedColor],
                       default: Optional[RealColor] = None) -> RealColor:
    """``resolve_color()`` followed by a color map lookup."""
    indexed = resolve_color(*candidates)
    if indexed.is_auto:
        return color_map.default if default is None else default
    return color_map[indexed]


__all__ = [
    "AUTO",
    "BLACK",
    "WHITE",
    "IndexedColor",
    "RealColor",
    "ColorMap",
    "resolve_color",
    "resolve_real_color",
]
