"""Unit tests for geometry value objects."""

import math

import pytest
from image_translator.domain.value_objects.geometry import (
    Point, Rect, Bounds, BoundingBox, Quadrilateral
)


class TestPoint:
    """Tests for Point class."""
    
    def test_distance_to(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == 5.0
    
    def test_arithmetic(self):
        assert Point(1, 2) + Point(3, 4) == Point(4, 6)
        assert Point(5, 5) - Point(2, 3) == Point(3, 2)
        assert Point(2, 3) * 2 == Point(4, 6)
    
    def test_from_value(self):
        assert Point.from_value({"x": 1, "y": 2}) == Point(1.0, 2.0)
        assert Point.from_value((3, 4)) == Point(3.0, 4.0)
        p = Point(5, 6)
        assert Point.from_value(p) is p


class TestRect:
    """Tests for Rect class."""
    
    def test_edges_and_center(self):
        rect = Rect(10, 20, 30, 40)
        assert rect.right == 40
        assert rect.bottom == 60
        assert rect.center == Point(25, 40)
    
    def test_union(self):
        union = Rect(0, 0, 10, 10).union(Rect(5, 5, 10, 10))
        assert union == Rect(0, 0, 15, 15)
    
    def test_union_all_empty(self):
        with pytest.raises(ValueError):
            Rect.union_all([])
    
    def test_vertical_overlap_ratio(self):
        a = Rect(0, 0, 10, 10)
        assert a.vertical_overlap_ratio(Rect(20, 5, 10, 10)) == 0.5
        assert a.vertical_overlap_ratio(Rect(0, 30, 10, 10)) == 0.0
    
    def test_scale(self):
        assert Rect(1, 2, 3, 4).scale(2, 3) == Rect(2, 6, 6, 12)
    
    def test_dict_form(self):
        rect = Rect.from_dict({"x": 1, "y": 2, "width": 3, "height": 4})
        assert rect.to_dict() == {"x": 1.0, "y": 2.0, "width": 3.0, "height": 4.0}


class TestBounds:
    """Tests for Bounds class."""
    
    def test_from_rect_snaps_outward(self):
        bounds = Bounds.from_rect(Rect(1.5, 2.2, 3.0, 4.0), 100, 100)
        assert bounds == Bounds(1, 2, 4, 5)
    
    def test_from_rect_outside_image_keeps_one_pixel(self):
        bounds = Bounds.from_rect(Rect(200, 200, 10, 10), 100, 100)
        assert bounds == Bounds(99, 99, 1, 1)
    
    def test_touching_windows_do_not_overlap(self):
        a = Bounds(0, 0, 10, 10)
        b = Bounds(10, 0, 5, 5)
        assert not a.overlaps(b)
        assert a.distance_to(b) == 0
    
    def test_overlap(self):
        assert Bounds(0, 0, 10, 10).overlaps(Bounds(5, 5, 10, 10))
    
    def test_distance_to(self):
        assert Bounds(0, 0, 10, 10).distance_to(Bounds(15, 0, 5, 5)) == 5
        assert Bounds(0, 0, 10, 10).distance_to(Bounds(13, 30, 5, 5)) == 20
    
    def test_is_close_to(self):
        a = Bounds(0, 0, 10, 10)
        assert a.is_close_to(Bounds(5, 5, 10, 10), 0)
        assert a.is_close_to(Bounds(15, 0, 5, 5), 5)
        assert not a.is_close_to(Bounds(15, 0, 5, 5), 4)
    
    def test_area(self):
        assert Bounds(3, 4, 5, 6).area == 30


class TestQuadrilateral:
    """Tests for Quadrilateral class."""
    
    def test_from_bbox(self):
        quad = Quadrilateral.from_bbox(0, 0, 40, 10)
        assert quad.bounding_box == BoundingBox(0, 0, 40, 10)
        assert quad.angle == 0.0
        assert quad.edge_width == 40
        assert quad.edge_height == 10
        assert quad.area == 400
    
    def test_angle_of_tilted_quad(self):
        quad = Quadrilateral.from_points([(0, 0), (10, 10), (0, 20), (-10, 10)])
        assert math.isclose(quad.angle, 45.0)
    
    def test_from_points_requires_four(self):
        with pytest.raises(ValueError):
            Quadrilateral.from_points([(0, 0), (1, 0), (1, 1)])
    
    def test_from_points_accepts_dicts(self):
        quad = Quadrilateral.from_points([
            {"x": 0, "y": 0}, {"x": 4, "y": 0}, {"x": 4, "y": 2}, {"x": 0, "y": 2}
        ])
        assert quad.to_list()[2] == {"x": 4.0, "y": 2.0}
    
    def test_unpacking(self):
        p1, p2, p3, p4 = Quadrilateral.from_bbox(0, 0, 1, 1)
        assert p3 == Point(1, 1)
    
    def test_normalized_starts_at_top_left(self):
        quad = Quadrilateral.from_points([(70, 10), (70, 30), (10, 30), (10, 10)])
        normalized = quad.normalized()
        assert normalized == Quadrilateral.from_bbox(10, 10, 60, 20)
        assert normalized.angle == 0.0
        assert normalized.edge_width == 60
        assert normalized.edge_height == 20
    
    def test_normalized_keeps_tilted_order(self):
        quad = Quadrilateral.from_points([(0, 0), (40, 4), (39, 14), (-1, 10)])
        assert quad.normalized() == quad
    
    def test_scale(self):
        quad = Quadrilateral.from_bbox(1, 1, 2, 2).scale(2, 3)
        assert quad.p3 == Point(6, 9)
