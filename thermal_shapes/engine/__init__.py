"""Thermal blob extraction and shape analysis engine."""

from thermal_shapes.engine.config import AnalysisConfig
from thermal_shapes.engine.extract import get_raw_shapes, merge_shapes, offset_raw_shape
from thermal_shapes.engine.normalize import get_solid_shapes
from thermal_shapes.engine.pipeline import FrameAnalysis, FramePipeline

__all__ = [
    "AnalysisConfig",
    "FrameAnalysis",
    "FramePipeline",
    "get_raw_shapes",
    "get_solid_shapes",
    "merge_shapes",
    "offset_raw_shape",
]
