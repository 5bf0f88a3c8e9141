"""
Collision Detection
===================

Axis-aligned bounding-box tests. Edge contact does not count as a hit.
"""

from __future__ import annotations

from typing import NamedTuple


class Rect(NamedTuple):
    """Axis-aligned rectangle given by its top-left corner and size."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> "Rect":
        return cls(cx - width / 2, cy - height / 2, width, height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def aabb_intersects(a: Rect, b: Rect) -> bool:
    """True if the two rectangles overlap with positive area."""
    return (
        a.x < b.right
        and a.right > b.x
        and a.y < b.bottom
        and a.bottom > b.y
    )


def check_collision(
    px: float, py: float, pw: float, ph: float,
    ox: float, oy: float, ow: float, oh: float
) -> bool:
    """Overlap test on raw coordinates (top-left corner plus size)."""
    return aabb_intersects(Rect(px, py, pw, ph), Rect(ox, oy, ow, oh))
