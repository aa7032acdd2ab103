from __future__ import annotations

import numpy as np
from numba import njit

from .geometry import Size, Window
from .scheduling import ChunkRange

__all__ = ["ESCAPE_RADIUS_SQ", "escape_time", "compute_chunk"]

ESCAPE_RADIUS_SQ = 4.0


@njit(nogil=True)
def _escape_time(cx: float, cy: float, limit: int) -> int:
    x = cx
    y = cy
    count = 0
    while count < limit:
        xy = x * y
        xx = x * x
        yy = y * y
        if xx + yy > ESCAPE_RADIUS_SQ:
            break
        count += 1
        x = xx - yy + cx
        y = xy * 2.0 + cy
    return count


def escape_time(cx: float, cy: float, limit: int) -> int:
    """Number of iterations before ``z -> z*z + c`` leaves radius 2, or ``limit``.

    The orbit is seeded at ``z0 = c``. Arithmetic is float64; renderers that
    iterate in float32 can disagree by a few counts on pixels near the set
    boundary.
    """
    return int(_escape_time(float(cx), float(cy), int(limit)))


@njit(nogil=True)
def _compute_range(
    start: int,
    end: int,
    grid_width: int,
    width: float,
    height: float,
    origin_x: float,
    origin_y: float,
    window_width: float,
    window_height: float,
    limit: int,
) -> np.ndarray:
    n = end - start
    if n < 0:
        n = 0
    data = np.empty(n, dtype=np.uint32)
    top = origin_y + window_height
    for i in range(start, start + n):
        col = i % grid_width
        row = i // grid_width
        cx = origin_x + (col / width) * window_width
        cy = top - (row / height) * window_height
        data[i - start] = _escape_time(cx, cy, limit)
    return data


def compute_chunk(size: Size, window: Window, limit: int, chunk: ChunkRange) -> np.ndarray:
    """Escape times for the pixel indices ``[chunk.start, chunk.end)``, in order."""
    return _compute_range(
        chunk.start,
        chunk.end,
        size.grid_width,
        float(size.width),
        float(size.height),
        float(window.origin.x),
        float(window.origin.y),
        float(window.width),
        float(window.height),
        int(limit),
    )
