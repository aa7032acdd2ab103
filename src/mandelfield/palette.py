"""Cyclic palette interpolation from escape counts to RGB."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from numba import njit

from .errors import ConfigurationError

__all__ = ["IN_SET_COLOR", "as_palette_array", "color_for", "colorize_field", "palette_swatch"]

IN_SET_COLOR = (0, 0, 0)


def as_palette_array(palette: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Return ``palette`` as an ``(n, 3)`` float64 array."""
    colors = np.asarray(palette, dtype=np.float64)
    if colors.ndim != 2 or colors.shape[0] == 0:
        raise ConfigurationError("palette must be a non-empty list of colors")
    if colors.shape[1] != 3:
        raise ConfigurationError(f"palette colors must have 3 components, got {colors.shape[1]}")
    return colors


def _check_color_steps(color_steps: float) -> float:
    steps = float(color_steps)
    if not (steps > 0.0 and math.isfinite(steps)):
        raise ConfigurationError(f"color_steps must be a positive number, got {color_steps}")
    return steps


@njit(nogil=True)
def _channel(left: float, right: float, frac: float) -> int:
    value = left + (right - left) * frac
    # Truncate, saturating at the 8-bit bounds.
    if not value > 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value)


@njit(nogil=True)
def _color_for(count, limit, color_steps, palette):
    if count == limit:
        return 0, 0, 0
    n = palette.shape[0]
    t = (count % color_steps) * n / color_steps
    base = math.floor(t)
    left = int(base) % n
    right = (left + 1) % n
    frac = t - base
    return (
        _channel(palette[left, 0], palette[right, 0], frac),
        _channel(palette[left, 1], palette[right, 1], frac),
        _channel(palette[left, 2], palette[right, 2], frac),
    )


def color_for(
    count: int,
    limit: int,
    color_steps: float,
    palette: Sequence[Sequence[float]] | np.ndarray,
) -> Tuple[int, int, int]:
    """Color for one escape count.

    Counts equal to ``limit`` are in the set and always map to black. Other
    counts repeat every ``color_steps`` iterations, sweeping linearly through
    every palette entry and back to the first.
    """
    r, g, b = _color_for(
        int(count), int(limit), _check_color_steps(color_steps), as_palette_array(palette)
    )
    return int(r), int(g), int(b)


@njit(nogil=True)
def _colorize(field, grid_width, grid_height, limit, color_steps, palette):
    raster = np.zeros((grid_height, grid_width, 3), dtype=np.uint8)
    for row in range(grid_height):
        for col in range(grid_width):
            r, g, b = _color_for(field[row * grid_width + col], limit, color_steps, palette)
            raster[row, col, 0] = r
            raster[row, col, 1] = g
            raster[row, col, 2] = b
    return raster


def colorize_field(
    field: np.ndarray,
    grid_width: int,
    grid_height: int,
    limit: int,
    color_steps: float,
    palette: Sequence[Sequence[float]] | np.ndarray,
) -> np.ndarray:
    """Apply ``color_for`` to every pixel, giving a ``(height, width, 3)`` uint8 raster."""
    if field.size != grid_width * grid_height:
        raise ValueError(
            f"field has {field.size} entries, expected {grid_width}x{grid_height}"
        )
    return _colorize(
        np.ascontiguousarray(field, dtype=np.int64),
        int(grid_width),
        int(grid_height),
        int(limit),
        _check_color_steps(color_steps),
        as_palette_array(palette),
    )


def palette_swatch(palette: Sequence[Sequence[float]] | np.ndarray, swatch: int = 100) -> np.ndarray:
    """One ``swatch``-pixel square per palette entry, left to right."""
    colors = np.clip(as_palette_array(palette), 0, 255).astype(np.uint8)
    row = np.repeat(colors, swatch, axis=0)
    return np.broadcast_to(row, (swatch,) + row.shape).copy()
