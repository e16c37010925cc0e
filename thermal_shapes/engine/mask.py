"""Pixel-neighbourhood queries on a frame mask."""

from __future__ import annotations

import numpy as np

from thermal_shapes.config import settings
from thermal_shapes.engine.extract import MaskBuffer, as_mask_array

# 8-connected neighbour offsets (dx, dy)
_NEIGHBOURS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]

# Half-size of the local density window
_DENSITY_RADIUS = 2


def all_neighbours_equal(
    x: int,
    y: int,
    mask: MaskBuffer,
    bit: int,
    width: int | None = None,
    height: int | None = None,
) -> bool:
    """True if all eight neighbours of (x, y) hold exactly ``bit``.

    A pixel on the frame border has neighbours outside it and is never
    surrounded.
    """
    width = settings.frame_width if width is None else width
    height = settings.frame_height if height is None else height
    grid = as_mask_array(mask, width, height)
    for dx, dy in _NEIGHBOURS:
        nx, ny = x + dx, y + dy
        if not (0 <= nx < width and 0 <= ny < height):
            return False
        if grid[ny, nx] != bit:
            return False
    return True


def local_density(
    x: int,
    y: int,
    mask: MaskBuffer,
    bit: int,
    width: int | None = None,
    height: int | None = None,
) -> int:
    """Count pixels with ``bit`` set in the window [x-2, x+2) × [y-2, y+2).

    The window is clipped to the frame; its far edge never reaches the last
    row or column.
    """
    width = settings.frame_width if width is None else width
    height = settings.frame_height if height is None else height
    grid = as_mask_array(mask, width, height)
    x0 = max(x - _DENSITY_RADIUS, 0)
    x1 = min(x + _DENSITY_RADIUS, width - 1)
    y0 = max(y - _DENSITY_RADIUS, 0)
    y1 = min(y + _DENSITY_RADIUS, height - 1)
    if x1 <= x0 or y1 <= y0:
        return 0
    return int(np.count_nonzero(grid[y0:y1, x0:x1] & bit))
