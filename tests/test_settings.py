"""Tests for drawing settings and their YAML files."""

import pytest

from draftkit.errors import ConfigurationError
from draftkit.geom import Point, Vector
from draftkit.settings import (DrawingSettings, load_settings, save_settings,
                               settings_from_dict, settings_to_dict)
from draftkit.viewport import Plane


class TestDrawingSettings:

    def test_defaults(self):
        s = DrawingSettings()
        assert s.file_name is None
        assert s.drawing_plane == Plane.xy()
        assert s.unit_precision == 4

    def test_formatting(self):
        s = DrawingSettings(unit_precision=2, angle_precision=1)
        assert s.format_distance(3.14159) == "3.14"
        assert s.format_angle(-90.0) == "270.0"

    def test_bad_precision(self):
        with pytest.raises(ConfigurationError):
            DrawingSettings(unit_precision=-1)
        with pytest.raises(ConfigurationError):
            DrawingSettings(angle_precision=1.5)


class TestSettingsYaml:

    def test_from_dict(self):
        s = settings_from_dict({
            'file_name': 'part.dxf',
            'drawing_plane': {'point': [0, 0, 1], 'normal': [0, 1, 0]},
            'unit_precision': 3,
        })
        assert s.file_name == 'part.dxf'
        assert s.drawing_plane.point == Point(0, 0, 1)
        assert s.drawing_plane.normal == Vector(0, 1, 0)
        assert s.unit_precision == 3
        assert s.angle_precision == 0

    def test_empty(self):
        assert settings_from_dict(None) == DrawingSettings()
        assert settings_from_dict({}) == DrawingSettings()

    def test_bad_dicts(self):
        with pytest.raises(ConfigurationError):
            settings_from_dict({'bogus': 1})
        with pytest.raises(ConfigurationError):
            settings_from_dict({'drawing_plane': {'normal': [0, 0]}})
        with pytest.raises(ConfigurationError):
            settings_from_dict({'drawing_plane': {'normal': [0, 0, 0]}})
        with pytest.raises(ConfigurationError):
            settings_from_dict(["not", "a", "mapping"])

    def test_save_and_load(self, tmp_path):
        s = DrawingSettings('bracket.dxf', Plane(Point(1, 2, 3), Vector(0, 0, 1)), 2, 1)
        path = save_settings(s, tmp_path / "settings.yaml")
        assert path.exists()
        assert load_settings(path) == s
        assert settings_from_dict(settings_to_dict(s)) == s

    def test_load_malformed(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("unit_precision: [1,\n")
        with pytest.raises(ConfigurationError):
            load_settings(path)
