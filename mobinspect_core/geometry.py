# mobinspect_core/geometry.py
"""
@file geometry.py
@brief Bounding-box containment and overlap helpers.
"""

from __future__ import annotations

from .models import BoundingBox


def area(box: BoundingBox) -> float:
    return box.width * box.height


def contains_point(box: BoundingBox, x: float, y: float) -> bool:
    """Inclusive on all four edges."""
    return box.x <= x <= box.x + box.width and box.y <= y <= box.y + box.height


def intersection_area(a: BoundingBox, b: BoundingBox) -> float:
    overlap_x = max(0, min(a.x + a.width, b.x + b.width) - max(a.x, b.x))
    overlap_y = max(0, min(a.y + a.height, b.y + b.height) - max(a.y, b.y))
    return overlap_x * overlap_y


def overlap_ratio(a: BoundingBox, b: BoundingBox) -> float:
    """
    Intersection area divided by the area of the smaller box.

    Returns 0.0 when the smaller box has no positive area.
    """
    min_area = min(area(a), area(b))
    if min_area <= 0:
        return 0.0
    return intersection_area(a, b) / min_area
