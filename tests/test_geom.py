import pytest
from math import sqrt

from draftkit.errors import InvalidGeometryError
from draftkit.geom import (BoundingBox, Point, Vector, angle_in_span,
                           between_narrow, close, correct_angle, dist,
                           epsilon, isfullsweep, midpoint, sweep_angle,
                           unique_points)
## unit tests for draftkit geom.py


class TestScalars:
    """scalar and angle helpers"""

    def test_close(self):
        assert close(1.0, 1.0 + epsilon / 2)
        assert not close(1.0, 1.0 + epsilon * 2)

    def test_between_narrow(self):
        assert between_narrow(0.0, 1.0, 0.5)
        assert between_narrow(1.0, 0.0, 0.5)
        assert not between_narrow(0.0, 1.0, 0.0)
        assert not between_narrow(0.0, 1.0, 1.0)
        assert not between_narrow(0.0, 1.0, epsilon / 2)

    def test_correct_angle(self):
        assert correct_angle(-90.0) == pytest.approx(270.0)
        assert correct_angle(720.0) == 0.0
        assert correct_angle(360.0 - epsilon / 10) == 0.0

    def test_spans(self):
        assert isfullsweep(0.0, 360.0)
        assert not isfullsweep(0.0, 180.0)
        assert angle_in_span(90.0, 0.0, 180.0)
        assert not angle_in_span(270.0, 0.0, 180.0)
        ## wrapping span
        assert angle_in_span(10.0, 270.0, 90.0)
        assert angle_in_span(300.0, 270.0, 90.0)
        assert not angle_in_span(180.0, 270.0, 90.0)
        ## end points are inside
        assert angle_in_span(180.0, 0.0, 180.0)
        assert sweep_angle(270.0, 90.0) == pytest.approx(180.0)
        assert sweep_angle(0.0, 360.0) == 360.0


class TestPointVector:
    """points, vectors and their arithmetic"""

    def test_affine_rules(self):
        p = Point(1, 2, 0)
        v = Point(4, 6, 0) - p
        assert isinstance(v, Vector)
        assert v == Vector(3, 4, 0)
        assert v.length == pytest.approx(5.0)
        q = p + v * 0.5
        assert isinstance(q, Point)
        assert q.close_to(Point(2.5, 4, 0))
        assert (q - v).close_to(Point(-0.5, 0, 0))

    def test_exact_and_close_equality(self):
        assert Point(1, 2, 3) == Point(1, 2, 3)
        assert Point(1, 2, 3) != Point(1, 2, 3 + epsilon / 10)
        assert Point(1, 2, 3).close_to(Point(1, 2, 3 + epsilon / 10))

    def test_cross_dot(self):
        assert Vector.x_axis().cross(Vector.y_axis()) == Vector.z_axis()
        assert Vector.x_axis().dot(Vector.y_axis()) == 0.0
        assert Vector(1, 1, 0).is_orthogonal_to(Vector(-1, 1, 0))
        assert Vector(1, 1, 0).is_parallel_to(Vector(-2, -2, 0))

    def test_normalize(self):
        v = Vector(3, 0, 4).normalize()
        assert v.length == pytest.approx(1.0)
        with pytest.raises(InvalidGeometryError):
            Vector.zero().normalize()
        with pytest.raises(ValueError):
            Vector(0, 0, epsilon / 10).normalize()

    def test_angles(self):
        assert Vector(0, 1, 0).to_angle() == pytest.approx(90.0)
        assert Vector(0, -1, 0).to_angle() == pytest.approx(270.0)
        assert Vector.angle_between(Vector.x_axis(), Vector(1, 1, 0)) == pytest.approx(45.0)

    def test_right_vector_from_normal(self):
        assert Vector.right_vector_from_normal(Vector.z_axis()).close_to(Vector.x_axis())
        assert Vector.right_vector_from_normal(-Vector.z_axis()).close_to(-Vector.x_axis())
        right = Vector.right_vector_from_normal(Vector.x_axis())
        assert right.close_to(Vector.y_axis())

    def test_helpers(self):
        assert dist(Point(0, 0, 0), Point(1, 1, 1)) == pytest.approx(sqrt(3))
        assert midpoint(Point(0, 0, 0), Point(2, 4, 6)) == Point(1, 2, 3)
        pts = unique_points([Point(0, 0, 0), Point(epsilon / 10, 0, 0), Point(1, 0, 0)])
        assert len(pts) == 2


class TestBoundingBox:
    """bounding boxes"""

    def test_from_points(self):
        box = BoundingBox.from_points(Point(1, 5, 0), Point(-1, 2, 3))
        assert box.min_point == Point(-1, 2, 0)
        assert box.max_point == Point(1, 5, 3)
        assert box.size == Vector(2, 3, 3)
        assert box.center == Point(0, 3.5, 1.5)
        assert BoundingBox.from_points([Point(0, 0, 0), Point(1, 1, 0)]).size == Vector(1, 1, 0)
        with pytest.raises(InvalidGeometryError):
            BoundingBox.from_points()

    def test_union_contains_intersects(self):
        a = BoundingBox.from_points(Point(0, 0, 0), Point(1, 1, 0))
        b = BoundingBox.from_points(Point(2, 2, 0), Point(3, 3, 0))
        u = a.union(b)
        assert u.contains(Point(2.5, 0.5, 0))
        assert not a.contains(Point(2.5, 0.5, 0))
        assert not a.intersects(b)
        assert u.intersects(a)
        assert BoundingBox.includes([]) is None
        assert BoundingBox.includes([a, b]) == u
