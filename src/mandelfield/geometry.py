"""Pixel-grid and window geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidGeometryError

__all__ = [
    "Size",
    "Point",
    "Window",
    "pixel_to_point",
    "point_to_index",
    "pixel_to_window_coordinate",
]


@dataclass(frozen=True)
class Size:
    """Extent of a pixel grid or of a window in the plane."""

    width: float
    height: float

    @property
    def grid_width(self) -> int:
        return int(self.width)

    @property
    def grid_height(self) -> int:
        return int(self.height)

    @property
    def total_pixels(self) -> int:
        """Number of samples once the extent is truncated to whole pixels."""
        return self.grid_width * self.grid_height


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Window:
    """Region of the plane to sample. ``origin`` is the bottom-left corner."""

    origin: Point
    size: Size

    @property
    def width(self) -> float:
        return self.size.width

    @property
    def height(self) -> float:
        return self.size.height

    def is_finite(self) -> bool:
        return all(
            math.isfinite(v)
            for v in (self.origin.x, self.origin.y, self.size.width, self.size.height)
        )


def pixel_to_point(index: int, grid_width: int) -> Point:
    """Split a row-major pixel index into column ``x`` and row ``y``."""
    if grid_width == 0:
        raise InvalidGeometryError("grid width must be non-zero to map a pixel index")
    row, col = divmod(index, grid_width)
    return Point(float(col), float(row))


def point_to_index(point: Point, grid_width: int) -> int:
    # Out-of-grid points produce out-of-grid indices.
    return grid_width * math.floor(point.y) + math.floor(point.x)


def pixel_to_window_coordinate(pixel: Point, grid_size: Size, window: Window) -> Point:
    """Map a pixel coordinate into the window.

    Row 0 is the top edge of the window, so increasing ``pixel.y`` walks
    down from ``origin.y + height`` towards ``origin.y``.
    """
    if grid_size.width == 0 or grid_size.height == 0:
        raise InvalidGeometryError(
            f"cannot normalize pixel against a {grid_size.width}x{grid_size.height} grid"
        )
    norm_x = pixel.x / grid_size.width
    norm_y = pixel.y / grid_size.height
    cx = window.origin.x + norm_x * window.width
    cy = (window.origin.y + window.height) - norm_y * window.height
    return Point(cx, cy)
