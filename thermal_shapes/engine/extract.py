"""Span extraction — run-length encode a mask and group spans into shapes.

A single top-to-bottom scan. Each closed run becomes a Span and is attached
to the shape(s) it touches on the row above or below. Touching includes a run
that starts exactly where a run on the neighbouring row ends. When one span
touches several shapes, the earliest shape keeps the span and absorbs the
others. Shape identity is tracked with a union-find so each span only checks
the previous row.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from numpy.typing import NDArray

from thermal_shapes.errors import InvalidArgumentError
from thermal_shapes.models.shapes import Point, RawShape, Span

logger = logging.getLogger(__name__)

MaskBuffer = Union[bytes, bytearray, memoryview, NDArray[np.uint8]]


def as_mask_array(mask: MaskBuffer, width: int, height: int) -> NDArray[np.uint8]:
    """View a frame buffer as a (height, width) uint8 array."""
    if isinstance(mask, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(mask, dtype=np.uint8)
    else:
        flat = np.asarray(mask, dtype=np.uint8).reshape(-1)
    if flat.size < width * height:
        raise InvalidArgumentError(
            f"mask holds {flat.size} pixels, expected {width}x{height}"
        )
    return flat[: width * height].reshape(height, width)


def row_runs(row: NDArray[np.bool_]) -> list[tuple[int, int]]:
    """Half-open [start, end) runs of True in a 1-D boolean row."""
    padded = np.concatenate(([False], row, [False]))
    edges = np.flatnonzero(padded[1:] != padded[:-1])
    return [(int(s), int(e)) for s, e in zip(edges[::2], edges[1::2])]


def spans_touch(a: Span, b: Span) -> bool:
    """Horizontal overlap test used between vertically adjacent rows."""
    return not (b.x1 < a.x0 or b.x0 >= a.x1)


def span_overlaps_shape(span: Span, shape: RawShape) -> bool:
    """True if the shape has a span on the row above or below that touches."""
    for y in (span.y - 1, span.y + 1):
        for other in shape.get(y, ()):
            if spans_touch(span, other):
                return True
    return False


def shapes_overlap(a: RawShape, b: RawShape) -> bool:
    """True if the two shapes share any row with horizontally touching spans."""
    for y, row_a in a.items():
        row_b = b.get(y)
        if not row_b:
            continue
        for span_b in row_b:
            for span_a in row_a:
                if spans_touch(span_b, span_a):
                    return True
    return False


def _merge_into(target: RawShape, other: RawShape) -> RawShape:
    for y, spans in other.items():
        target.setdefault(y, []).extend(spans)
    return target


def _copy_raw_shape(shape: RawShape) -> RawShape:
    return {y: list(spans) for y, spans in shape.items()}


def merge_shapes(a: RawShape, b: RawShape) -> RawShape:
    """Row-wise union of two raw shapes, as a new shape."""
    return _merge_into(_copy_raw_shape(a), b)


def _find(parent: list[int], x: int) -> int:
    while parent[x] != x:
        parent[x] = parent[parent[x]]
        x = parent[x]
    return x


def get_raw_shapes(
    mask: MaskBuffer,
    width: int,
    height: int,
    mask_bit: int = 255,
) -> list[RawShape]:
    """Extract connected regions of pixels with ``mask_bit`` set.

    Returns raw shapes in the order their first span was found.
    """
    grid = as_mask_array(mask, width, height)
    set_pixels = (grid & mask_bit) != 0

    # Union-find over shape ids. The root of a class is always its oldest id,
    # which is the shape the class's spans are stored under.
    parent: list[int] = []
    shapes: dict[int, RawShape] = {}
    prev_row: list[tuple[Span, int]] = []

    for y in range(height):
        current_row: list[tuple[Span, int]] = []
        for x0, x1 in row_runs(set_pixels[y]):
            span = Span(x0, x1, y)
            roots = sorted(
                {_find(parent, sid) for other, sid in prev_row if spans_touch(span, other)}
            )
            if not roots:
                sid = len(parent)
                parent.append(sid)
                shapes[sid] = {y: [span]}
            else:
                sid = roots[0]
                shapes[sid].setdefault(y, []).append(span)
                for later in roots[1:]:
                    _merge_into(shapes[sid], shapes.pop(later))
                    parent[later] = sid
            current_row.append((span, sid))
        prev_row = current_row

    logger.debug("Extracted %d raw shapes from %dx%d mask", len(shapes), width, height)
    # dict keeps creation order, which is ascending id
    return list(shapes.values())


def offset_raw_shape(shapes: list[RawShape], offset: Point) -> list[RawShape]:
    """Translate every span of every shape by (offset.x, offset.y)."""
    dx, dy = int(offset.x), int(offset.y)
    moved: list[RawShape] = []
    for shape in shapes:
        new_shape: RawShape = {}
        for row in shape.values():
            for span in row:
                new_shape.setdefault(span.y + dy, []).append(
                    Span(span.x0 + dx, span.x1 + dx, span.y + dy)
                )
        moved.append(new_shape)
    return moved
