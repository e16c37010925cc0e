"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

from thermal_shapes.models.features import FaceInfo, HorizontalExtent, VerticalExtent
from thermal_shapes.models.shapes import Point, Quad

# Masks drawn as text: '#' is a set pixel, anything else is clear.

BODY_ART = """
..........
...####...
...####...
....##....
..######..
..######..
..######..
..........
"""

NOISE_AND_BODY_ART = """
#.........
..........
...####...
...####...
....##....
..######..
..######..
..........
"""


def art_to_mask(art: str, bit: int = 255) -> tuple[bytearray, int, int]:
    """Return (mask, width, height) for a block of mask art."""
    rows = [line for line in art.strip("\n").splitlines()]
    height = len(rows)
    width = max(len(r) for r in rows)
    mask = bytearray(width * height)
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == "#":
                mask[y * width + x] = bit
    return mask, width, height


def make_face(
    head: Quad,
    face_width: float = 10.0,
    face_height: float = 10.0,
    head_lock: int = 1,
) -> FaceInfo:
    cx = (head.top_left.x + head.top_right.x) / 2
    cy = (head.top_left.y + head.bottom_left.y) / 2
    return FaceInfo(
        head=head,
        horizontal=HorizontalExtent(
            left=Point(cx - face_width / 2, cy), right=Point(cx + face_width / 2, cy)
        ),
        vertical=VerticalExtent(
            top=Point(cx, cy - face_height / 2), bottom=Point(cx, cy + face_height / 2)
        ),
        head_lock=head_lock,
    )


def square_quad(x: float, y: float, size: float) -> Quad:
    """Axis-aligned quad in image coordinates (y grows downwards)."""
    return Quad(
        top_left=Point(x, y),
        top_right=Point(x + size, y),
        bottom_left=Point(x, y + size),
        bottom_right=Point(x + size, y + size),
    )


@pytest.fixture
def mask_from_art() -> Callable[..., tuple[bytearray, int, int]]:
    return art_to_mask


@pytest.fixture
def face_factory() -> Callable[..., FaceInfo]:
    return make_face


@pytest.fixture
def quad_factory() -> Callable[..., Quad]:
    return square_quad


@pytest.fixture
def body_mask() -> tuple[bytearray, int, int]:
    return art_to_mask(BODY_ART)


@pytest.fixture
def noisy_body_mask() -> tuple[bytearray, int, int]:
    return art_to_mask(NOISE_AND_BODY_ART)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1337)
