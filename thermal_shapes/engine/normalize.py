"""Shape normalisation — solidify raw shapes, smooth them, draw them back.

fill_vertical_cracks and extend_to_bottom rewrite the list they are given.
They replace Span records rather than mutating them, so other holders of the
same spans are unaffected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Union

import numpy as np
from numpy.typing import NDArray

from thermal_shapes.config import settings
from thermal_shapes.engine.constants import CRACK_RATIO, NARROWING_TOLERANCE
from thermal_shapes.errors import EmptyShapeError, InvalidArgumentError
from thermal_shapes.models.shapes import RawShape, Shape, Span

logger = logging.getLogger(__name__)

WritableMask = Union[bytearray, memoryview, NDArray[np.uint8]]


def get_solid_shapes(raw_shapes: Iterable[RawShape]) -> list[Shape]:
    """Collapse every row of every raw shape to a single [min x0, max x1) span."""
    solid_shapes: list[Shape] = []
    for raw in raw_shapes:
        solid: Shape = []
        for y, spans in raw.items():
            if not spans:
                continue
            x0 = min(span.x0 for span in spans)
            x1 = max(span.x1 for span in spans)
            solid.append(Span(x0, x1, int(y)))
        solid.sort(key=lambda span: span.y)
        solid_shapes.append(solid)
    return solid_shapes


def fill_vertical_cracks(shape: Shape, ratio: float = CRACK_RATIO) -> Shape:
    """Bridge sudden narrow pinches in a solid shape, in place.

    A crack is a run of rows each narrower than 1/ratio of the row just above
    the run. Rows in the crack are widened to cover the rows bounding it
    (above and below); nothing is ever narrowed.
    """
    n = len(shape)
    i = 0
    while i + 1 < n:
        start = shape[i]
        start_width = start.width
        end_index = i
        while end_index + 1 < n and start_width > ratio * shape[end_index + 1].width:
            end_index += 1

        if end_index > i:
            # Row below the crack, or its last row when it runs off the shape
            below = shape[end_index + 1] if end_index + 1 < n else shape[end_index]
            x0 = min(start.x0, below.x0)
            x1 = max(start.x1, below.x1)
            for j in range(i + 1, end_index + 1):
                span = shape[j]
                shape[j] = Span(min(x0, span.x0), max(x1, span.x1), span.y)
            logger.debug("Filled crack over rows %d-%d", shape[i + 1].y, shape[end_index].y)
        i = end_index + 1 if end_index > i else i + 1
    return shape


def extend_to_bottom(
    shape: Shape,
    height: int | None = None,
    tolerance: int = NARROWING_TOLERANCE,
) -> Shape:
    """Stop the lower half of a shape from narrowing, then run it off the frame.

    From the middle row down, a span whose width changes by more than
    ``tolerance`` from the previous row is widened to include that row. The
    last row is then repeated until the shape reaches row ``height``.
    """
    if not shape:
        raise EmptyShapeError("extend_to_bottom needs a non-empty shape")
    height = settings.frame_height if height is None else height

    halfway = len(shape) // 2
    prev = shape[halfway]
    for i in range(halfway + 1, len(shape)):
        span = shape[i]
        if abs(prev.width - span.width) > tolerance:
            span = Span(min(span.x0, prev.x0), max(span.x1, prev.x1), span.y)
            shape[i] = span
        prev = span

    while prev.y < height:
        prev = Span(prev.x0, prev.x1, prev.y + 1)
        shape.append(prev)
    return shape


def _as_flat_mask(data: WritableMask) -> NDArray[np.uint8]:
    if isinstance(data, np.ndarray):
        flat = np.ravel(data)
        # ravel copies non-contiguous arrays
        if flat.size and not np.shares_memory(flat, data):
            raise InvalidArgumentError("mask array must be contiguous to draw into it")
        return flat
    return np.frombuffer(data, dtype=np.uint8)


def _draw_spans(flat: NDArray[np.uint8], spans: Iterable[Span], bit: int, width: int) -> None:
    for span in spans:
        if span.x0 >= span.x1:
            logger.warning("Skipping degenerate span x0=%s x1=%s y=%s", span.x0, span.x1, span.y)
            continue
        offset = span.y * width
        x0 = max(span.x0, 0)
        x1 = min(span.x1, width)
        if x0 >= x1 or offset < 0 or offset >= flat.size:
            logger.debug("Span x0=%s x1=%s y=%s is outside the frame", span.x0, span.x1, span.y)
            continue
        flat[offset + x0 : offset + x1] |= bit


def draw_shapes_into_mask(
    shapes: Iterable[Shape],
    data: WritableMask,
    bit: int,
    width: int | None = None,
) -> None:
    """OR ``bit`` into every pixel covered by the solid shapes."""
    width = settings.frame_width if width is None else width
    flat = _as_flat_mask(data)
    for shape in shapes:
        _draw_spans(flat, shape, bit, width)


def draw_raw_shapes_into_mask(
    shapes: Iterable[RawShape],
    data: WritableMask,
    bit: int,
    width: int | None = None,
) -> None:
    """OR ``bit`` into every pixel covered by the raw shapes."""
    width = settings.frame_width if width is None else width
    flat = _as_flat_mask(data)
    for shape in shapes:
        for row in shape.values():
            _draw_spans(flat, row, bit, width)
