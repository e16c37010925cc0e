"""Tests for span extraction and raw shape merging."""

from __future__ import annotations

import numpy as np
import pytest

from thermal_shapes.engine.analyze import raw_shape_area, shape_area
from thermal_shapes.engine.extract import (
    get_raw_shapes,
    merge_shapes,
    offset_raw_shape,
    row_runs,
    shapes_overlap,
    span_overlaps_shape,
)
from thermal_shapes.engine.normalize import draw_raw_shapes_into_mask, get_solid_shapes
from thermal_shapes.errors import InvalidArgumentError
from thermal_shapes.models.shapes import Point, Span


def _sorted_rows(raw):
    return {y: sorted(spans, key=lambda s: s.x0) for y, spans in raw.items()}


class TestRowRuns:
    def test_runs_are_half_open(self):
        row = np.array([0, 1, 1, 0, 1, 0, 0, 1, 1, 1], dtype=bool)
        assert row_runs(row) == [(1, 3), (4, 5), (7, 10)]

    def test_empty_row(self):
        assert row_runs(np.zeros(5, dtype=bool)) == []


class TestGetRawShapes:
    def test_boundary_scenario(self):
        width, height = 10, 3
        mask = bytearray(width * height)
        for y, (x0, x1) in enumerate([(2, 5), (2, 6), (3, 5)]):
            for x in range(x0, x1):
                mask[y * width + x] = 1

        shapes = get_raw_shapes(mask, width, height, mask_bit=1)
        assert len(shapes) == 1
        assert shapes[0] == {0: [Span(2, 5, 0)], 1: [Span(2, 6, 1)], 2: [Span(3, 5, 2)]}

        solid = get_solid_shapes(shapes)
        assert solid == [[Span(2, 5, 0), Span(2, 6, 1), Span(3, 5, 2)]]
        assert shape_area(solid[0]) == 9

    def test_diagonal_staircase_is_one_shape(self, mask_from_art):
        mask, w, h = mask_from_art(
            """
##....
..##..
....##
"""
        )
        shapes = get_raw_shapes(mask, w, h)
        assert len(shapes) == 1
        assert raw_shape_area(shapes[0]) == 6

    def test_u_shape_merges_when_arms_join(self, mask_from_art):
        mask, w, h = mask_from_art(
            """
#...#
#...#
#####
"""
        )
        shapes = get_raw_shapes(mask, w, h)
        assert len(shapes) == 1
        rows = _sorted_rows(shapes[0])
        assert rows[0] == [Span(0, 1, 0), Span(4, 5, 0)]
        assert rows[2] == [Span(0, 5, 2)]
        assert raw_shape_area(shapes[0]) == 9

    def test_first_shape_absorbs_later_ones_and_order_is_kept(self, mask_from_art):
        mask, w, h = mask_from_art(
            """
#.#.#
#.#.#
#.###
"""
        )
        shapes = get_raw_shapes(mask, w, h)
        assert len(shapes) == 2
        assert shapes[0] == {0: [Span(0, 1, 0)], 1: [Span(0, 1, 1)], 2: [Span(0, 1, 2)]}
        assert raw_shape_area(shapes[1]) == 7
        assert sorted(shapes[1]) == [0, 1, 2]

    def test_chain_of_merges_across_rows(self, mask_from_art):
        mask, w, h = mask_from_art(
            """
#.#.#.#
#.#.#.#
###.###
..#####
"""
        )
        shapes = get_raw_shapes(mask, w, h)
        assert len(shapes) == 1
        assert raw_shape_area(shapes[0]) == 4 + 4 + 6 + 5

    def test_separate_blobs_in_discovery_order(self, mask_from_art):
        mask, w, h = mask_from_art(
            """
....##
##....
##....
"""
        )
        shapes = get_raw_shapes(mask, w, h)
        assert len(shapes) == 2
        assert shapes[0] == {0: [Span(4, 6, 0)]}
        assert shapes[1] == {1: [Span(0, 2, 1)], 2: [Span(0, 2, 2)]}

    def test_same_row_runs_do_not_join_by_themselves(self, mask_from_art):
        mask, w, h = mask_from_art("##.##")
        assert len(get_raw_shapes(mask, w, h)) == 2

    def test_run_to_end_of_row(self, mask_from_art):
        mask, w, h = mask_from_art("..###")
        assert get_raw_shapes(mask, w, h) == [{0: [Span(2, 5, 0)]}]

    def test_only_mask_bit_counts(self):
        mask = bytearray([0b01, 0b10, 0b11, 0b00])
        assert get_raw_shapes(mask, 4, 1, mask_bit=0b10) == [{0: [Span(1, 3, 0)]}]

    def test_numpy_mask(self):
        grid = np.zeros((4, 4), dtype=np.uint8)
        grid[1:3, 1:3] = 255
        shapes = get_raw_shapes(grid, 4, 4)
        assert shapes == [{1: [Span(1, 3, 1)], 2: [Span(1, 3, 2)]}]

    def test_short_buffer_raises(self):
        with pytest.raises(InvalidArgumentError):
            get_raw_shapes(bytearray(5), 4, 4)

    def test_empty_mask(self):
        assert get_raw_shapes(bytes(12), 4, 3) == []

    def test_random_mask_round_trip(self, rng):
        width, height = 23, 17
        grid = (rng.random((height, width)) < 0.45).astype(np.uint8) * 255
        shapes = get_raw_shapes(grid, width, height)

        redrawn = bytearray(width * height)
        draw_raw_shapes_into_mask(shapes, redrawn, 255, width)
        assert bytes(redrawn) == grid.tobytes()

        # No span is claimed by two shapes
        assert sum(raw_shape_area(s) for s in shapes) == int(np.count_nonzero(grid))


class TestOverlap:
    def test_span_overlaps_row_above_or_below(self):
        shape = {4: [Span(2, 5, 4)]}
        assert span_overlaps_shape(Span(4, 8, 5), shape)
        # A run starting where the neighbouring run ends still touches
        assert span_overlaps_shape(Span(5, 7, 3), shape)
        assert not span_overlaps_shape(Span(0, 2, 3), shape)
        assert not span_overlaps_shape(Span(6, 8, 5), shape)
        assert not span_overlaps_shape(Span(2, 5, 4), shape)  # same row
        assert not span_overlaps_shape(Span(2, 5, 7), shape)

    def test_shapes_overlap_on_shared_row(self):
        a = {0: [Span(0, 4, 0)], 1: [Span(0, 4, 1)]}
        b = {1: [Span(3, 6, 1)]}
        c = {1: [Span(6, 9, 1)], 2: [Span(0, 4, 2)]}
        assert shapes_overlap(a, b)
        assert not shapes_overlap(a, c)


class TestMergeAndOffset:
    def test_merge_is_row_union_and_fresh(self):
        a = {0: [Span(0, 2, 0)], 1: [Span(0, 2, 1)]}
        b = {1: [Span(5, 6, 1)], 2: [Span(1, 3, 2)]}
        merged = merge_shapes(a, b)
        assert merged == {
            0: [Span(0, 2, 0)],
            1: [Span(0, 2, 1), Span(5, 6, 1)],
            2: [Span(1, 3, 2)],
        }
        assert a == {0: [Span(0, 2, 0)], 1: [Span(0, 2, 1)]}
        merged[2].append(Span(9, 10, 2))
        assert b[2] == [Span(1, 3, 2)]

    def test_offset_translates_without_mutating(self):
        shapes = [{0: [Span(0, 2, 0)]}, {3: [Span(1, 4, 3), Span(6, 7, 3)]}]
        moved = offset_raw_shape(shapes, Point(10, 5))
        assert moved == [{5: [Span(10, 12, 5)]}, {8: [Span(11, 14, 8), Span(16, 17, 8)]}]
        assert shapes[0] == {0: [Span(0, 2, 0)]}
