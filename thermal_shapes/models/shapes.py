"""Per-frame value records: spans, shapes, points, rects, quads.

Span-based shapes:
  RawShape → row → every span found on that row (pre-normalisation)
  Shape    → one span per row, ascending y (solid)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, TypeAlias


@dataclass(frozen=True)
class Span:
    """Half-open horizontal pixel run [x0, x1) on row y."""

    x0: int
    x1: int
    y: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0


@dataclass(frozen=True)
class Point:
    x: float
    y: float


# Same representation, used where the value is a direction or displacement
Vec2: TypeAlias = Point

RawPoint: TypeAlias = tuple[float, float]

RawShape: TypeAlias = dict[int, list[Span]]
Shape: TypeAlias = list[Span]
ConvexHull: TypeAlias = list[Point]


@dataclass(frozen=True)
class Rect:
    x0: float
    x1: float
    y0: float
    y1: float


@dataclass(frozen=True)
class Quad:
    """Four corners of an arbitrary, roughly convex quadrilateral."""

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    def corners(self) -> list[Point]:
        return [self.top_left, self.top_right, self.bottom_left, self.bottom_right]


class LineFit(NamedTuple):
    """Least-squares line: unit direction plus y-intercept."""

    direction: Vec2
    intercept: float
