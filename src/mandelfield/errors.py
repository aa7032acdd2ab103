"""Exception types raised while generating and coloring escape-time fields."""

from __future__ import annotations

__all__ = [
    "MandelfieldError",
    "ConfigurationError",
    "InvalidGeometryError",
    "ComputationError",
    "OutputError",
]


class MandelfieldError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(MandelfieldError, ValueError):
    """Render configuration is missing keys or violates a limit."""


class InvalidGeometryError(MandelfieldError, ValueError):
    """Pixel grid or window has a degenerate extent."""


class ComputationError(MandelfieldError, ArithmeticError):
    """Window coordinates cannot be iterated (NaN or infinite values)."""


class OutputError(MandelfieldError, ValueError):
    """Rendered image cannot be written to the requested path."""
