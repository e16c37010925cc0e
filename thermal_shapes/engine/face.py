"""Face and region geometry: containment, stability and shape joining.

Face records come from the detector and are only read: ``head`` (a Quad),
``horizontal.left/right``, ``vertical.top/bottom`` and ``head_lock``.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from thermal_shapes.engine.constants import FACE_AREA_TOLERANCE, FACE_MOVEMENT_TOLERANCE
from thermal_shapes.engine.extract import get_raw_shapes, merge_shapes, offset_raw_shape
from thermal_shapes.engine.hull import bounds_for_convex_hull
from thermal_shapes.engine.normalize import get_solid_shapes
from thermal_shapes.models.shapes import Point, Quad, RawShape, Shape
from thermal_shapes.utils.geometry import distance, point_is_left_of_line

if TYPE_CHECKING:
    from thermal_shapes.models.features import FaceInfo, ROIFeature

logger = logging.getLogger(__name__)


def point_is_in_quad(p: Point, quad: Quad) -> bool:
    """Strictly inside all four edges, walked bottom-left → top-left → … ."""
    return (
        point_is_left_of_line(quad.bottom_left, quad.top_left, p)
        and point_is_left_of_line(quad.top_right, quad.bottom_right, p)
        and point_is_left_of_line(quad.bottom_right, quad.bottom_left, p)
        and point_is_left_of_line(quad.top_left, quad.top_right, p)
    )


def face_is_front_on(face: FaceInfo) -> bool:
    return face.head_lock != 0


def face_area(face: FaceInfo) -> float:
    width = distance(face.horizontal.left, face.horizontal.right)
    height = distance(face.vertical.top, face.vertical.bottom)
    return width * height


def face_intersects_thermal_ref(face: FaceInfo, region: ROIFeature | None) -> bool:
    """True if any corner of the reference region falls inside the head quad.

    One-directional: a head corner inside the region does not count.
    """
    if region is None:
        return False
    head = face.head
    quad = Quad(head.top_left, head.top_right, head.bottom_left, head.bottom_right)
    corners = (
        Point(region.x0, region.y0),
        Point(region.x0, region.y1),
        Point(region.x1, region.y0),
        Point(region.x1, region.y1),
    )
    return any(point_is_in_quad(corner, quad) for corner in corners)


def face_has_moved_or_changed_in_size(
    face: FaceInfo,
    prev_face: FaceInfo | None,
    area_tolerance: float = FACE_AREA_TOLERANCE,
    movement_tolerance: float = FACE_MOVEMENT_TOLERANCE,
) -> bool:
    if prev_face is None:
        return True
    if not face_is_front_on(prev_face):
        return True

    area_change = abs(face_area(face) - face_area(prev_face))
    if area_change > area_tolerance:
        logger.debug("Face area changed by %.1f", area_change)
        return True

    max_movement = max(
        distance(face.head.top_left, prev_face.head.top_left),
        distance(face.head.top_right, prev_face.head.top_right),
        distance(face.head.bottom_left, prev_face.head.bottom_left),
        distance(face.head.bottom_right, prev_face.head.bottom_right),
    )
    if max_movement > movement_tolerance:
        logger.debug("Face moved %.1fpx", max_movement)
        return True
    return False


def _rows_of(shape: Shape) -> RawShape:
    rows: RawShape = {}
    for span in shape:
        rows.setdefault(span.y, []).append(span)
    return rows


def rasterize_quad(quad: Quad) -> list[RawShape]:
    """Pixels strictly inside the quad, as raw shapes in frame coordinates."""
    bounds = bounds_for_convex_hull(quad.corners())
    x0 = math.floor(bounds.x0)
    y0 = math.floor(bounds.y0)
    width = math.ceil(bounds.x1) - x0
    height = math.ceil(bounds.y1) - y0
    if width <= 0 or height <= 0:
        return []

    bitmap = np.zeros((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            if point_is_in_quad(Point(x0 + x, y0 + y), quad):
                bitmap[y, x] = 255
    return offset_raw_shape(get_raw_shapes(bitmap, width, height), Point(x0, y0))


def join_shapes(top: Shape, bottom: Shape, quad: Quad) -> Shape:
    """Stitch a head shape onto a body shape through the quad between them."""
    joined = _rows_of(top)
    for raw in rasterize_quad(quad):
        joined = merge_shapes(joined, raw)
    joined = merge_shapes(joined, _rows_of(bottom))
    return get_solid_shapes([joined])[0]
