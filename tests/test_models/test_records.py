"""Tests for value records, detector models and settings."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from thermal_shapes.config import Settings, configure_logging
from thermal_shapes.engine import AnalysisConfig
from thermal_shapes.errors import EmptyShapeError, InvalidArgumentError, ThermalShapesError
from thermal_shapes.models.features import FaceInfo, ROIFeature
from thermal_shapes.models.shapes import Point, Quad, Span

FACE_PAYLOAD = {
    "head": {
        "top_left": {"x": 10, "y": 10},
        "top_right": {"x": 30, "y": 10},
        "bottom_left": {"x": 10, "y": 30},
        "bottom_right": {"x": 30, "y": 30},
    },
    "horizontal": {"left": {"x": 15, "y": 20}, "right": {"x": 25, "y": 20}},
    "vertical": {"top": {"x": 20, "y": 15}, "bottom": {"x": 20, "y": 25}},
    "head_lock": 2,
}


class TestShapes:
    def test_span_width(self):
        assert Span(3, 10, 0).width == 7

    def test_records_are_hashable_values(self):
        assert Span(1, 2, 3) == Span(1, 2, 3)
        assert len({Point(1, 2), Point(1.0, 2.0)}) == 1

    def test_quad_corners(self):
        quad = Quad(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1))
        assert quad.corners() == [Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)]


class TestDetectorModels:
    def test_face_from_payload(self):
        face = FaceInfo.model_validate(FACE_PAYLOAD)
        assert isinstance(face.head, Quad)
        assert face.head.bottom_right == Point(30, 30)
        assert face.horizontal.right == Point(25, 20)
        assert face.head_lock == 2

    def test_head_lock_defaults_to_zero(self):
        payload = {k: v for k, v in FACE_PAYLOAD.items() if k != "head_lock"}
        assert FaceInfo.model_validate(payload).head_lock == 0

    def test_missing_field_is_rejected(self):
        payload = {k: v for k, v in FACE_PAYLOAD.items() if k != "vertical"}
        with pytest.raises(ValidationError):
            FaceInfo.model_validate(payload)

    def test_roi_feature(self):
        roi = ROIFeature(x0=1, y0=2, x1="3.5", y1=4)
        assert roi.x1 == 3.5


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("THERMAL_SHAPES_FRAME_WIDTH", raising=False)
        monkeypatch.delenv("THERMAL_SHAPES_FRAME_HEIGHT", raising=False)
        s = Settings(_env_file=None)
        assert (s.frame_width, s.frame_height) == (120, 160)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("THERMAL_SHAPES_FRAME_WIDTH", "64")
        assert Settings(_env_file=None).frame_width == 64

    def test_analysis_config_overrides(self):
        config = AnalysisConfig(frame_width=32, crack_ratio=3.0)
        assert config.frame_width == 32
        assert config.crack_ratio == 3.0
        assert config.mask_bit == 255

    def test_configure_logging_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging("debug")
        configure_logging("nonsense")
        assert calls[0]["level"] == logging.DEBUG
        assert calls[1]["level"] == logging.INFO


def test_error_hierarchy():
    assert issubclass(EmptyShapeError, InvalidArgumentError)
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(InvalidArgumentError, ThermalShapesError)
