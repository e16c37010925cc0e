"""Shape measurement and classification heuristics.

Edge handling: a span "touches the frame edge" when it starts at column 0 or
its x1 equals the last column index (x1 == width - 1). Edge spans are usually
a body cut off by the frame, so the waist search avoids them where it can.
"""

from __future__ import annotations

from dataclasses import dataclass

from thermal_shapes.config import settings
from thermal_shapes.engine.constants import (
    CEILING_HEAT_MIN_ROWS,
    CIRCULARITY_TOLERANCE,
    SLANT_DISTANCE_TOLERANCE,
    SLANT_WINDOW_ROWS,
)
from thermal_shapes.errors import EmptyShapeError
from thermal_shapes.models.shapes import RawShape, Rect, Shape, Span
from thermal_shapes.utils.geometry import distance_sq, end_point, start_point


def span_width(span: Span) -> int:
    return span.x1 - span.x0


def shape_area(shape: Shape) -> int:
    return sum(span_width(span) for span in shape)


def raw_shape_area(shape: RawShape) -> int:
    return sum(shape_area(row) for row in shape.values())


def largest_shape(shapes: list[Shape]) -> Shape:
    """Shape with the greatest area; the first one wins ties. [] if none."""
    best: Shape = []
    best_area = 0
    for shape in shapes:
        area = shape_area(shape)
        if area > best_area:
            best = shape
            best_area = area
    return best


def rect_dims(rect: Rect) -> tuple[float, float]:
    """(width, height) of a rect."""
    return rect.x1 - rect.x0, rect.y1 - rect.y0


def _require_non_empty(shape: Shape, what: str) -> None:
    if not shape:
        raise EmptyShapeError(f"{what} needs a non-empty shape")


def bounds_for_shape(shape: Shape) -> Rect:
    """Bounds of a row-sorted solid shape."""
    _require_non_empty(shape, "bounds_for_shape")
    return Rect(
        x0=min(span.x0 for span in shape),
        x1=max(span.x1 for span in shape),
        y0=shape[0].y,
        y1=shape[-1].y,
    )


def bounds_for_raw_shape(shape: RawShape) -> Rect:
    spans = [span for row in shape.values() for span in row]
    if not spans:
        raise EmptyShapeError("bounds_for_raw_shape needs a non-empty shape")
    return Rect(
        x0=min(span.x0 for span in spans),
        x1=max(span.x1 for span in spans),
        y0=min(span.y for span in spans),
        y1=max(span.y for span in spans),
    )


def span_touches_edge(span: Span, width: int | None = None) -> bool:
    width = settings.frame_width if width is None else width
    return span.x0 == 0 or span.x1 == width - 1


def widest_span(shape: Shape) -> Span:
    _require_non_empty(shape, "widest_span")
    widest = shape[0]
    for span in shape:
        if span_width(span) > span_width(widest):
            widest = span
    return widest


def narrowest_span(shape: Shape, width: int | None = None) -> Span:
    """Narrowest span clear of the frame edges; the last one wins ties.

    Falls back to the first span when every span touches an edge.
    """
    _require_non_empty(shape, "narrowest_span")
    inner = [span for span in shape if not span_touches_edge(span, width)]
    if not inner:
        return shape[0]
    narrowest = inner[0]
    for span in inner:
        if span_width(span) <= span_width(narrowest):
            narrowest = span
    return narrowest


@dataclass(frozen=True)
class _WaistCandidate:
    left: Span
    right: Span
    d: float
    skew: int
    on_edge: bool

    def sort_key(self) -> tuple[bool, float, int, int]:
        # Larger summed row index first on full ties
        return (self.on_edge, self.d, self.skew, -(self.left.y + self.right.y))


def narrowest_slanted(
    shape: Shape,
    start: Span,
    width: int | None = None,
    window: int = SLANT_WINDOW_ROWS,
    tolerance: float = SLANT_DISTANCE_TOLERANCE,
) -> tuple[Span, Span]:
    """Find the best (possibly slanted) waist near ``start``.

    Every ordered pair of distinct rows around ``start`` is scored by the
    squared distance from the left row's start point to the right row's end
    point. Among the candidates within ``tolerance`` pixels of the shortest,
    the least slanted wins.
    """
    try:
        n_index = shape.index(start)
    except ValueError:
        n_index = -1
    start_index = max(0, n_index - window)
    end_index = min(len(shape) - 1, n_index + window)

    width = settings.frame_width if width is None else width
    candidates: list[_WaistCandidate] = []
    for i in range(start_index, end_index):
        for j in range(start_index, end_index):
            if i == j:
                continue
            left, right = shape[i], shape[j]
            candidates.append(
                _WaistCandidate(
                    left=left,
                    right=right,
                    d=distance_sq(start_point(left), end_point(right)),
                    skew=abs(left.y - right.y),
                    on_edge=left.x0 == 0 or right.x1 == width - 1,
                )
            )
    if not candidates:
        return start, start

    candidates.sort(key=_WaistCandidate.sort_key)
    best = candidates[0]
    best_distance = best.d**0.5
    chosen = best
    for candidate in candidates[1:]:
        if abs(candidate.d**0.5 - best_distance) >= tolerance:
            break
        if candidate.skew < chosen.skew:
            chosen = candidate
    return chosen.left, chosen.right


def narrowest_spans(shape: Shape, width: int | None = None) -> tuple[Span, Span]:
    return narrowest_slanted(shape, narrowest_span(shape, width), width)


def shape_is_not_circular(shape: Shape, tolerance: int = CIRCULARITY_TOLERANCE) -> bool:
    w, h = rect_dims(bounds_for_shape(shape))
    return abs(w - h) > tolerance


def shape_is_on_side(shape: Shape, width: int | None = None) -> bool:
    return any(span_touches_edge(span, width) for span in shape)


def is_not_ceiling_heat(shape: Shape, min_rows: int = CEILING_HEAT_MIN_ROWS) -> bool:
    """False for short shapes hanging from the top row of the frame."""
    _require_non_empty(shape, "is_not_ceiling_heat")
    return not (shape[0].y == 0 and len(shape) < min_rows)


def clone_shape(shape: Shape) -> Shape:
    return [Span(span.x0, span.x1, span.y) for span in shape]
