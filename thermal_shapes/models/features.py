"""Records supplied by the face / feature detectors.

The geometry helpers only read these fields (duck-typed); the models exist so
callers and tests can build well-formed records.
"""

from __future__ import annotations

from pydantic import BaseModel

from thermal_shapes.models.shapes import Point, Quad


class HorizontalExtent(BaseModel):
    left: Point
    right: Point


class VerticalExtent(BaseModel):
    top: Point
    bottom: Point


class FaceInfo(BaseModel):
    head: Quad
    horizontal: HorizontalExtent
    vertical: VerticalExtent
    # 0 = not facing the camera
    head_lock: int = 0


class ROIFeature(BaseModel):
    """Axis-aligned region of interest, e.g. the calibration reference."""

    x0: float
    y0: float
    x1: float
    y1: float
