"""Point-in-polygon test for hotspot regions.

Coordinates are normalised to the image, so both the point and the polygon
vertices live in ``[0, 1]``. Points that sit exactly on an edge or vertex get
whatever answer the ray-casting walk produces for them; that ambiguity is
inherent to the algorithm and is left as is so boundary clicks keep scoring
the way they always have.
"""
from __future__ import annotations

import sys
from typing import Sequence

from . import config
from .types import HotspotPoint

_EPSILON = sys.float_info.epsilon


def point_in_polygon(point: HotspotPoint, polygon: Sequence[HotspotPoint]) -> bool:
    """Even-odd ray cast from ``point`` towards +x."""

    if len(polygon) < config.POLYGON_MIN_VERTICES:
        return False
    x, y = point.x, point.y
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        span = (yj - yi) or _EPSILON
        crosses = (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / span + xi
        if crosses:
            inside = not inside
        j = i
    return inside


__all__ = ["point_in_polygon"]
