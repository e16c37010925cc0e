"""Per-frame pipeline: mask → raw shapes → solid shapes → measurements.

Each step reads and fills a FrameAnalysis. A failing step is recorded in
``errors`` and the remaining steps still run; steps whose inputs are missing
are skipped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from thermal_shapes.engine.analyze import (
    bounds_for_shape,
    clone_shape,
    is_not_ceiling_heat,
    largest_shape,
    narrowest_slanted,
    narrowest_span,
    shape_is_not_circular,
    shape_is_on_side,
)
from thermal_shapes.engine.config import AnalysisConfig
from thermal_shapes.engine.extract import MaskBuffer, get_raw_shapes
from thermal_shapes.engine.hull import convex_hull_for_shape
from thermal_shapes.engine.normalize import fill_vertical_cracks, get_solid_shapes
from thermal_shapes.models.shapes import ConvexHull, RawShape, Rect, Shape, Span

logger = logging.getLogger(__name__)


@dataclass
class FrameAnalysis:
    """Everything derived from one frame's mask."""

    raw_shapes: list[RawShape] = field(default_factory=list)
    solid_shapes: list[Shape] = field(default_factory=list)
    # Largest solid shape, crack-filled when enabled (a copy; solid_shapes is untouched)
    body: Shape = field(default_factory=list)
    bounds: Rect | None = None
    hull: ConvexHull = field(default_factory=list)
    waist: tuple[Span, Span] | None = None
    on_side: bool = False
    not_circular: bool = False
    not_ceiling_heat: bool = False

    completed_steps: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_body(self) -> bool:
        return len(self.body) > 0


Step = Callable[[FrameAnalysis, AnalysisConfig], None]


def _extract(result: FrameAnalysis, config: AnalysisConfig, mask: MaskBuffer) -> None:
    result.raw_shapes = get_raw_shapes(
        mask, config.frame_width, config.frame_height, config.mask_bit
    )


def _solidify(result: FrameAnalysis, config: AnalysisConfig) -> None:
    result.solid_shapes = get_solid_shapes(result.raw_shapes)


def _select_body(result: FrameAnalysis, config: AnalysisConfig) -> None:
    body = clone_shape(largest_shape(result.solid_shapes))
    if body and config.fill_cracks:
        fill_vertical_cracks(body, config.crack_ratio)
    result.body = body


def _measure(result: FrameAnalysis, config: AnalysisConfig) -> None:
    result.bounds = bounds_for_shape(result.body)
    result.hull = convex_hull_for_shape(result.body)


def _waist(result: FrameAnalysis, config: AnalysisConfig) -> None:
    narrowest = narrowest_span(result.body, config.frame_width)
    result.waist = narrowest_slanted(
        result.body,
        narrowest,
        config.frame_width,
        window=config.slant_window_rows,
        tolerance=config.slant_distance_tolerance,
    )


def _classify(result: FrameAnalysis, config: AnalysisConfig) -> None:
    result.on_side = shape_is_on_side(result.body, config.frame_width)
    result.not_circular = shape_is_not_circular(result.body, config.circularity_tolerance)
    result.not_ceiling_heat = is_not_ceiling_heat(result.body, config.ceiling_heat_min_rows)


# Steps that need a body; skipped on empty frames
_BODY_STEPS: list[tuple[str, Step]] = [
    ("measure", _measure),
    ("waist", _waist),
    ("classify", _classify),
]


class FramePipeline:
    """Runs the analysis steps over one mask at a time."""

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self.config = config or AnalysisConfig()

    def run(self, mask: MaskBuffer) -> FrameAnalysis:
        start = time.perf_counter()
        result = FrameAnalysis()

        steps: list[tuple[str, Step]] = [
            ("extract", lambda r, c: _extract(r, c, mask)),
            ("solidify", _solidify),
            ("select_body", _select_body),
        ]
        for name, fn in steps:
            self._run_step(name, fn, result)

        if result.has_body:
            for name, fn in _BODY_STEPS:
                self._run_step(name, fn, result)
        else:
            logger.debug("No shapes in frame; skipping %d body steps", len(_BODY_STEPS))

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Frame analysed: %d shapes, body area %d, %d/%d steps in %.1fms",
            len(result.solid_shapes),
            sum(span.width for span in result.body),
            len(result.completed_steps),
            len(steps) + len(_BODY_STEPS),
            total,
        )
        return result

    def _run_step(self, name: str, fn: Step, result: FrameAnalysis) -> None:
        t0 = time.perf_counter()
        try:
            fn(result, self.config)
            result.completed_steps.append(name)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", name, elapsed)
        except Exception as e:
            result.errors[name] = str(e)
            logger.warning("  %s FAILED: %s", name, e)
