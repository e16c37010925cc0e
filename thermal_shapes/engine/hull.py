"""Convex hulls of shapes and point sets.

The hull itself comes from Qhull (scipy.spatial.ConvexHull); 2D hull vertices
are returned counter-clockwise and passed through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from scipy.spatial import ConvexHull as QhullConvexHull
from scipy.spatial import QhullError

from thermal_shapes.errors import EmptyShapeError
from thermal_shapes.models.shapes import ConvexHull, Point, RawPoint, Rect, Shape

logger = logging.getLogger(__name__)


def fast_convex_hull(points: Sequence[RawPoint]) -> list[RawPoint]:
    """Ordered hull vertices of a 2D point set.

    Degenerate inputs Qhull rejects (fewer than three distinct points, or all
    collinear) yield their extreme points: the segment's two ends, or the
    single point.
    """
    if len(points) == 0:
        return []
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    unique = np.unique(arr, axis=0)
    if len(unique) >= 3:
        try:
            hull = QhullConvexHull(unique)
            return [(float(unique[i, 0]), float(unique[i, 1])) for i in hull.vertices]
        except QhullError:
            logger.debug("Degenerate hull over %d points; using extremes", len(unique))

    # np.unique sorts lexicographically, so the ends are the extreme points
    first = (float(unique[0, 0]), float(unique[0, 1]))
    last = (float(unique[-1, 0]), float(unique[-1, 1]))
    return [first] if first == last else [first, last]


def convex_hull_for_points(points: Sequence[RawPoint]) -> ConvexHull:
    return [Point(x, y) for x, y in fast_convex_hull(points)]


def convex_hull_for_shape(shape: Shape) -> ConvexHull:
    """Hull of a solid shape's span end points."""
    points: list[RawPoint] = []
    for span in shape:
        points.append((span.x0, span.y))
        points.append((span.x1, span.y))
    return convex_hull_for_points(points)


def bounds_for_convex_hull(hull: ConvexHull) -> Rect:
    if not hull:
        raise EmptyShapeError("bounds_for_convex_hull needs at least one vertex")
    xs = [p.x for p in hull]
    ys = [p.y for p in hull]
    return Rect(x0=min(xs), x1=max(xs), y0=min(ys), y1=max(ys))
