"""Leaf-node point/vector helpers. No engine imports."""

from __future__ import annotations

import logging
import math

import numpy as np

from thermal_shapes.errors import EmptyShapeError, InvalidArgumentError
from thermal_shapes.models.shapes import LineFit, Point, RawPoint, Span, Vec2
from thermal_shapes.utils.orientation import orient2d

logger = logging.getLogger(__name__)

# Longest run returned by head() / tail()
MAX_SLICE_LENGTH = 5


def start_point(span: Span) -> Point:
    return Point(span.x0, span.y)


def end_point(span: Span) -> Point:
    return Point(span.x1, span.y)


def distance_sq(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


def distance_sq_raw(a: RawPoint, b: RawPoint) -> float:
    """distance_sq for (x, y) tuples. Same arithmetic, same result."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def distance(a: Point, b: Point) -> float:
    return math.sqrt(distance_sq(a, b))


def magnitude(vec: Vec2) -> float:
    return math.sqrt(vec.x * vec.x + vec.y * vec.y)


def normalise(vec: Vec2) -> Vec2:
    length = magnitude(vec)
    if length == 0.0:
        raise InvalidArgumentError("cannot normalise a zero-length vector")
    return Point(vec.x / length, vec.y / length)


def scale(vec: Vec2, factor: float) -> Vec2:
    return Point(vec.x * factor, vec.y * factor)


def perp(vec: Vec2) -> Vec2:
    """Clockwise perpendicular in y-up terms: (x, y) → (y, -x)."""
    return Point(vec.y, -vec.x)


def add(a: Vec2, b: Vec2) -> Vec2:
    return Point(a.x + b.x, a.y + b.y)


def sub(a: Vec2, b: Vec2) -> Vec2:
    return Point(a.x - b.x, a.y - b.y)


def dist_to_segment_squared(p: Point, v: Point, w: Point) -> float:
    """Squared distance from p to the closest point of segment v-w."""
    l2 = distance_sq(v, w)
    if l2 == 0:
        return distance_sq(p, v)
    t = ((p.x - v.x) * (w.x - v.x) + (p.y - v.y) * (w.y - v.y)) / l2
    t = max(0.0, min(1.0, t))
    return distance_sq(p, Point(v.x + t * (w.x - v.x), v.y + t * (w.y - v.y)))


def direction_of_set(points: list[Point]) -> LineFit:
    """Ordinary least-squares line through a point set.

    Returns the unit direction (1, gradient) normalised, plus the y-intercept.
    A vertical set (every x equal) has no defined gradient; direction and
    intercept come back as NaN.
    """
    if not points:
        raise EmptyShapeError("direction_of_set needs at least one point")

    xs = np.array([p.x for p in points], dtype=np.float64)
    ys = np.array([p.y for p in points], dtype=np.float64)
    mean_x = float(np.mean(xs))
    mean_y = float(np.mean(ys))
    num = float(np.sum((xs - mean_x) * (ys - mean_y)))
    den = float(np.sum((xs - mean_x) ** 2))

    if den == 0.0:
        logger.debug("Least-squares fit over %d points with a single x", len(points))
        return LineFit(Point(math.nan, math.nan), math.nan)

    gradient = num / den
    intercept = mean_y - gradient * mean_x
    return LineFit(normalise(Point(1.0, gradient)), intercept)


# ---------------------------------------------------------------------------
# Line side tests use only the sign of the robust predicate
# ---------------------------------------------------------------------------


def is_left(l0: Point, l1: Point, p: Point) -> float:
    """> 0 when p is left of l0→l1, < 0 when right, 0 when on the line."""
    return orient2d(l0.x, l0.y, l1.x, l1.y, p.x, p.y)


def point_is_left_of_or_on_line(l0: Point, l1: Point, p: Point) -> bool:
    return is_left(l0, l1, p) >= 0


def point_is_left_of_line(l0: Point, l1: Point, p: Point) -> bool:
    return is_left(l0, l1, p) > 0


# ---------------------------------------------------------------------------
# Point set helpers
# ---------------------------------------------------------------------------


def closest_point(point: Point, points: list[Point]) -> Point:
    if not points:
        raise EmptyShapeError("closest_point needs at least one candidate")
    best = points[0]
    best_d = distance_sq(best, point)
    for p in points[1:]:
        d = distance_sq(p, point)
        if d < best_d:
            best_d = d
            best = p
    return best


def points_are_equal(a: Point, b: Point) -> bool:
    return a.x == b.x and a.y == b.y


def point_is_in_set(pt: Point, points: list[Point]) -> bool:
    return any(points_are_equal(p, pt) for p in points)


def min_y_index(points: list[Point]) -> int:
    """Index of the first point with the smallest y (0 for an empty list)."""
    lowest_index = 0
    lowest_y = math.inf
    for i, p in enumerate(points):
        if p.y < lowest_y:
            lowest_y = p.y
            lowest_index = i
    return lowest_index


def head(points: list[Point]) -> list[Point]:
    """Leading points, at most MAX_SLICE_LENGTH and never the last point."""
    return points[: min(MAX_SLICE_LENGTH, len(points) - 1)] if points else []


def tail(points: list[Point]) -> list[Point]:
    """Trailing points, at most MAX_SLICE_LENGTH."""
    n = min(MAX_SLICE_LENGTH, len(points))
    return points[len(points) - n :]
