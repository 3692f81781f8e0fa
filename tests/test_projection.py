"""Tests for projecting entities and drawings onto a view."""

from math import cos, radians, sin

from draftkit.color import BLACK, ColorMap, IndexedColor, RealColor, WHITE
from draftkit.document import Drawing, Layer
from draftkit.entities import (Aggregate, Arc, Circle, Ellipse, Line, Location,
                               Polyline, Text)
from draftkit.geom import Point, Vector, close
from draftkit.projection import (ProjectedAggregate, ProjectedArc, ProjectedCircle,
                                 ProjectedLine, ProjectedText, project,
                                 project_drawing, resolve_color, show_all_viewport)
from draftkit.viewport import ProjectionStyle, ViewPort

LAYER = Layer("0")


def centered_view(style=ProjectionStyle.ORIGIN_TOP_LEFT):
    """ten drawing units across a 100 x 100 view, world origin in the
    middle"""
    vp = ViewPort(Point(-5, -5, 0), Vector.z_axis(), Vector.y_axis(), 10.0)
    return vp.transformation_matrix(100, 100, style)


def close_mod_180(angle, expected):
    d = (angle - expected) % 180.0
    return close(d, 0.0) or close(d, 180.0)


def arc_point(arc, ang):
    rot = radians(arc.rotation)
    t = radians(ang)
    x = arc.radius_x * cos(t)
    y = arc.radius_y * sin(t)
    return Point(arc.center.x + x * cos(rot) - y * sin(rot),
                 arc.center.y + x * sin(rot) + y * cos(rot), 0.0)


class TestProjectLines:

    def test_line_top_left(self):
        m = ViewPort.top_view().transformation_matrix(200, 100)
        p = project(Line(Point(0, 0, 0), Point(1, 1, 0)), LAYER, m)
        assert isinstance(p, ProjectedLine)
        assert p.p1.close_to(Point(0, 100, 0))
        assert p.p2.close_to(Point(10, 90, 0))
        assert p.layer is LAYER

    def test_polyline(self):
        pl = Polyline((Point(0, 0, 0), Point(1, 0, 0), Point(1, 1, 0)))
        p = project(pl, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert isinstance(p, ProjectedAggregate)
        assert len(p.children) == 2
        assert all(isinstance(c, ProjectedLine) for c in p.children)
        assert p.children[1].p1.close_to(Point(60, 50, 0))
        assert p.children[1].p2.close_to(Point(60, 60, 0))

    def test_location_is_not_projected(self):
        assert project(Location(Point(1, 1, 0)), LAYER, centered_view()) is None


class TestProjectConics:

    def test_circle(self):
        p = project(Circle(Point(0, 0, 0), 1.0), LAYER, centered_view())
        assert isinstance(p, ProjectedCircle)
        assert p.center.close_to(Point(50, 50, 0))
        assert close(p.radius_x, 10.0)
        assert close(p.radius_y, 10.0)

    def test_ellipse_axes(self):
        m = centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT)
        p = project(Ellipse(Point(0, 0, 0), Vector(2, 0, 0), 0.5), LAYER, m)
        assert isinstance(p, ProjectedCircle)
        assert close(p.radius_x, 20.0)
        assert close(p.radius_y, 10.0)
        assert close_mod_180(p.rotation, 0.0)

    def test_rotated_ellipse(self):
        m = centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT)
        p = project(Ellipse(Point(1, 0, 0), Vector(0, 2, 0), 0.5), LAYER, m)
        assert p.center.close_to(Point(60, 50, 0))
        assert close(p.radius_x, 20.0)
        assert close_mod_180(p.rotation, 90.0)

    def test_tilted_circle_becomes_ellipse(self):
        normal = Vector(0, 1, 1)
        c = Circle(Point(0, 0, 0), 1.0, normal)
        p = project(c, LAYER, centered_view())
        assert close(p.radius_x, 10.0)
        assert close(p.radius_y, 10.0 * cos(radians(45.0)))

    def test_edge_on_circle(self):
        c = Circle(Point(0, 0, 0), 1.0, Vector.x_axis())
        assert project(c, LAYER, centered_view()) is None

    def test_arc_end_points(self):
        arc = Arc(Point(0, 0, 0), 1.0, 0.0, 90.0)
        p = project(arc, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert isinstance(p, ProjectedArc)
        assert p.start_point.close_to(Point(60, 50, 0))
        assert p.end_point.close_to(Point(50, 60, 0))
        assert arc_point(p, p.start_angle).close_to(p.start_point)
        assert arc_point(p, p.end_angle).close_to(p.end_point)
        assert close((p.end_angle - p.start_angle) % 360.0, 90.0)

    def test_mirrored_arc_swaps_ends(self):
        ## the top-left style flips Y, so the arc is drawn the other way round
        arc = Arc(Point(0, 0, 0), 1.0, 0.0, 90.0)
        p = project(arc, LAYER, centered_view(ProjectionStyle.ORIGIN_TOP_LEFT))
        assert p.start_point.close_to(Point(50, 40, 0))
        assert p.end_point.close_to(Point(60, 50, 0))
        assert arc_point(p, p.start_angle).close_to(p.start_point)
        assert arc_point(p, p.end_angle).close_to(p.end_point)
        assert close((p.end_angle - p.start_angle) % 360.0, 90.0)

    def test_partial_ellipse_is_an_arc(self):
        el = Ellipse(Point(0, 0, 0), Vector(2, 0, 0), 0.5, 0.0, 180.0)
        p = project(el, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert isinstance(p, ProjectedArc)
        assert p.start_point.close_to(Point(70, 50, 0))
        assert p.end_point.close_to(Point(30, 50, 0))


class TestProjectText:

    def test_text(self):
        text = Text(Point(1, 1, 0), 2.0, 30.0, "label")
        p = project(text, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert isinstance(p, ProjectedText)
        assert p.location.close_to(Point(60, 60, 0))
        assert close(p.height, 20.0)
        assert close(p.rotation, 30.0)
        assert p.value == "label"

    def test_text_flipped_y(self):
        text = Text(Point(0, 0, 0), 1.0, 30.0, "label")
        p = project(text, LAYER, centered_view(ProjectionStyle.ORIGIN_TOP_LEFT))
        assert close(p.rotation, 330.0)
        assert close(p.height, 10.0)

    def test_placement(self):
        text = Text(Point(0, 0, 0), 1.0, 90.0, "t")
        p = project(text, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert p.placement().mul(Point(1, 0, 0)).close_to(Point(50, 51, 0))


class TestProjectAggregate:

    def test_offset_and_flatten(self):
        agg = Aggregate(Point(2, 0, 0), (Line(Point(0, 0, 0), Point(1, 0, 0)),))
        p = project(agg, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        assert isinstance(p, ProjectedAggregate)
        assert p.offset.close_to(Vector(20, 0, 0))
        flat = p.flatten()
        assert len(flat) == 1
        assert flat[0].p1.close_to(Point(70, 50, 0))
        assert flat[0].p2.close_to(Point(80, 50, 0))

    def test_nested_flatten(self):
        inner = Aggregate(Point(0, 1, 0), (Circle(Point(0, 0, 0), 1.0),))
        outer = Aggregate(Point(1, 0, 0), (inner, Location(Point(0, 0, 0))))
        p = project(outer, LAYER, centered_view(ProjectionStyle.ORIGIN_BOTTOM_LEFT))
        ## the location child has nothing to draw
        assert len(p.children) == 1
        flat = p.flatten()
        assert len(flat) == 1
        assert isinstance(flat[0], ProjectedCircle)
        assert flat[0].center.close_to(Point(60, 60, 0))

    def test_children_inherit_color(self):
        agg = Aggregate(Point(0, 0, 0), (Line(Point(0, 0, 0), Point(1, 0, 0)),
                                         Line(Point(0, 0, 0), Point(0, 1, 0), IndexedColor(5))),
                        IndexedColor(3))
        p = project(agg, LAYER, centered_view())
        cmap = ColorMap()
        assert p.children[0].resolve_color(cmap) == RealColor.from_rgb(0, 255, 0)
        assert p.children[1].resolve_color(cmap) == RealColor.from_rgb(0, 0, 255)


class TestResolveColor:

    def test_chain(self):
        cmap = ColorMap()
        m = centered_view()
        line = Line(Point(0, 0, 0), Point(1, 0, 0))
        red_layer = Layer("red", IndexedColor(1))
        assert resolve_color(project(line, red_layer, m), cmap) == RealColor.from_rgb(255, 0, 0)
        own = line.update(color=IndexedColor(5))
        assert resolve_color(project(own, red_layer, m), cmap) == RealColor.from_rgb(0, 0, 255)

    def test_default(self):
        m = centered_view()
        p = project(Line(Point(0, 0, 0), Point(1, 0, 0)), LAYER, m)
        assert resolve_color(p, ColorMap()) == WHITE
        assert resolve_color(p, ColorMap(), BLACK) == BLACK
        assert resolve_color(p, ColorMap().with_default(BLACK)) == BLACK


class TestProjectDrawing:

    def drawing(self):
        d = Drawing().add_layer(Layer("b")).add_layer(Layer("a"))
        d = d.add_layer(Layer("hidden", is_visible=False))
        d = d.add_entity(Line(Point(0, 0, 0), Point(1, 0, 0)), "b")
        d = d.add_entity(Circle(Point(0, 0, 0), 1.0), "a")
        d = d.add_entity(Location(Point(0, 0, 0)), "a")
        d = d.add_entity(Line(Point(0, 0, 0), Point(5, 5, 0)), "hidden")
        return d

    def test_groups_in_layer_order(self):
        vp = ViewPort(Point(-5, -5, 0), Vector.z_axis(), Vector.y_axis(), 10.0)
        groups = project_drawing(self.drawing(), vp, 100, 100)
        assert [layer.name for layer, _ in groups] == ["0", "a", "b"]
        by_name = dict((layer.name, projected) for layer, projected in groups)
        assert by_name["0"] == []
        assert len(by_name["a"]) == 1
        assert isinstance(by_name["a"][0], ProjectedCircle)
        assert isinstance(by_name["b"][0], ProjectedLine)
        assert by_name["b"][0].layer.name == "b"

    def test_show_all(self):
        d = Drawing().add_entity(Line(Point(0, 0, 0), Point(10, 10, 0)))
        vp = show_all_viewport(d, 100, 100)
        [(_, projected)] = project_drawing(d, vp, 100, 100)
        assert projected[0].p1.close_to(Point(20, 80, 0))
        assert projected[0].p2.close_to(Point(80, 20, 0))

    def test_show_all_ignores_hidden_layers(self):
        d = self.drawing()
        vp = show_all_viewport(d, 100, 100, pixel_buffer=0)
        ## only the unit circle and the unit line are visible
        assert close(vp.view_height, 2.0)
