"""
Tests for bounding-box collision.
"""

import pytest

from valdebt.core.collision import Rect, aabb_intersects, check_collision


class TestAabb:
    """Test axis-aligned overlap."""

    def test_overlapping_rects_collide(self):
        a = Rect(0, 0, 10, 10)
        b = Rect(5, 5, 10, 10)
        assert aabb_intersects(a, b)
        assert aabb_intersects(b, a)

    def test_contained_rect_collides(self):
        outer = Rect(0, 0, 100, 100)
        inner = Rect(40, 40, 10, 10)
        assert aabb_intersects(outer, inner)
        assert aabb_intersects(inner, outer)

    def test_separated_rects_do_not_collide(self):
        assert not aabb_intersects(Rect(0, 0, 10, 10), Rect(20, 0, 10, 10))
        assert not aabb_intersects(Rect(0, 0, 10, 10), Rect(0, 20, 10, 10))

    @pytest.mark.parametrize("other", [
        Rect(10, 0, 10, 10),    # touching right edge
        Rect(-10, 0, 10, 10),   # touching left edge
        Rect(0, 10, 10, 10),    # touching bottom edge
        Rect(0, -10, 10, 10),   # touching top edge
        Rect(10, 10, 10, 10),   # touching corner
    ])
    def test_edge_contact_is_not_a_hit(self, other):
        """Shared edges have zero overlap area."""
        assert not aabb_intersects(Rect(0, 0, 10, 10), other)

    def test_check_collision_raw_coordinates(self):
        assert check_collision(0, 0, 64, 64, 60, 60, 44, 44)
        assert not check_collision(0, 0, 64, 64, 64, 0, 44, 44)


class TestRect:
    """Test Rect helpers."""

    def test_from_center(self):
        r = Rect.from_center(480, 459, 64, 64)
        assert r.x == 448
        assert r.y == 427
        assert r.right == 512
        assert r.bottom == 491
