"""Tests for layers and drawings."""

import pytest

from draftkit.color import IndexedColor
from draftkit.document import DEFAULT_LAYER_NAME, Drawing, Layer
from draftkit.entities import Aggregate, Circle, Line
from draftkit.errors import DrawingIntegrityError, EntityNotFoundError
from draftkit.geom import Point
from draftkit.pcollections import PersistentSortedMap


def line(x=0.0):
    return Line(Point(x, 0, 0), Point(x + 1, 0, 0))


class TestLayer:

    def test_add_remove(self):
        layer = Layer("walls")
        a = line()
        l2 = layer.add(a)
        assert layer.entity_count == 0
        assert l2.entity_count == 1
        assert l2.entity_exists(a)
        l3 = l2.remove(a)
        assert l3.entity_count == 0
        assert l2.entity_count == 1

    def test_replace(self):
        a = line()
        b = line(5)
        layer = Layer("walls").add(a).replace(a, b)
        assert not layer.entity_exists(a)
        assert layer.get_entities() == [b]

    def test_missing_entity(self):
        layer = Layer("walls")
        with pytest.raises(EntityNotFoundError):
            layer.remove(line())
        with pytest.raises(KeyError):
            layer.replace(line(), line())

    def test_entities_ordered_by_id(self):
        a, b, c = line(), line(1), line(2)
        layer = Layer("x").add(c).add(a).add(b)
        assert [e.id for e in layer.get_entities()] == sorted([a.id, b.id, c.id])

    def test_update(self):
        layer = Layer("x").update(color=IndexedColor(3), is_visible=False)
        assert layer.color == IndexedColor(3)
        assert not layer.is_visible


class TestDrawing:

    def test_new_drawing(self):
        d = Drawing()
        assert d.current_layer_name == DEFAULT_LAYER_NAME
        assert [layer.name for layer in d.get_layers()] == ["0"]
        assert d.get_entities() == []
        assert d.get_extents() is None

    def test_add_entity_to_current_layer(self):
        a = line()
        d = Drawing().add_entity(a)
        assert d.get_entities() == [a]
        assert d.current_layer.entity_exists(a)
        assert d.containing_layer(a).name == "0"
        ## the original drawing is untouched
        assert Drawing().get_entities() == []

    def test_add_entity_to_named_layer(self):
        a = line()
        d = Drawing().add_layer(Layer("other")).add_entity(a, "other")
        assert d.containing_layer(a).name == "other"
        with pytest.raises(EntityNotFoundError):
            d.add_entity(line(), "missing")

    def test_replace_remove_entity(self):
        a = line()
        b = line(3)
        d = Drawing().add_entity(a)
        d2 = d.replace_entity(a, b)
        assert d2.get_entities() == [b]
        d3 = d2.remove_entity(b)
        assert d3.get_entities() == []
        assert d.get_entities() == [a]

    def test_edits_of_missing_entity_are_no_ops(self):
        d = Drawing().add_entity(line())
        stranger = line(9)
        assert d.remove_entity(stranger) is d
        assert d.replace_entity(stranger, line()) is d

    def test_entity_cannot_join_a_second_layer(self):
        a = line()
        d = Drawing().add_layer(Layer("1")).add_entity(a)
        with pytest.raises(DrawingIntegrityError):
            d.add_entity(a, "1")
        ## adding again to the same layer is harmless
        d2 = d.add_entity(a, "0")
        assert d2.get_entities() == [a]
        assert d2.remove_entity(a).get_entities() == []

    def test_extents_with_aggregate(self):
        agg = Aggregate(Point(1, 1, 0), (Line(Point(0, 0, 0), Point(1, 0, 0)),))
        d = Drawing().add_entity(line(-1)).add_entity(agg)
        box = d.get_extents()
        assert box.min_point.close_to(Point(-1, 0, 0))
        assert box.max_point.close_to(Point(2, 1, 0))

    def test_entity_on_two_layers(self):
        a = line()
        layers = PersistentSortedMap.from_items([
            ("0", Layer("0").add(a)),
            ("1", Layer("1").add(a)),
        ])
        d = Drawing(layers=layers)
        with pytest.raises(DrawingIntegrityError):
            d.containing_layer(a)

    def test_layer_edits(self):
        d = Drawing().add_layer(Layer("b")).add_layer(Layer("a"))
        assert [layer.name for layer in d.get_layers()] == ["0", "a", "b"]
        with pytest.raises(DrawingIntegrityError):
            d.add_layer(Layer("a"))
        d = d.set_current_layer("a")
        assert d.current_layer.name == "a"
        with pytest.raises(DrawingIntegrityError):
            d.remove_layer("a")
        d = d.remove_layer("b")
        assert [layer.name for layer in d.get_layers()] == ["0", "a"]
        with pytest.raises(EntityNotFoundError):
            d.remove_layer("b")
        with pytest.raises(EntityNotFoundError):
            d.set_current_layer("nope")

    def test_replace_layer_rename_follows_current(self):
        d = Drawing().set_current_layer("0")
        d = d.replace_layer(d.get_layer("0"), Layer("base"))
        assert d.current_layer_name == "base"
        assert [layer.name for layer in d.get_layers()] == ["base"]

    def test_bad_current_layer(self):
        with pytest.raises(DrawingIntegrityError):
            Drawing(current_layer_name="missing")

    def test_layers_from_list(self):
        d = Drawing(layers=[Layer("0"), Layer("x")])
        assert d.layer_exists("x")

    def test_entities_in_layer_order(self):
        a = line()
        b = line(2)
        d = Drawing().add_layer(Layer("z")).add_layer(Layer("a"))
        d = d.add_entity(a, "z").add_entity(b, "a")
        assert d.get_entities() == [b, a]

    def test_extents(self):
        d = Drawing().add_entity(line()).add_entity(Circle(Point(5, 5, 0), 1.0))
        box = d.get_extents()
        assert box.min_point.close_to(Point(0, 0, 0))
        assert box.max_point.close_to(Point(6, 6, 0))
        hidden = d.replace_layer(d.current_layer, d.current_layer.update(is_visible=False))
        assert hidden.get_extents() is None
        assert hidden.get_extents(visible_only=False) is not None
