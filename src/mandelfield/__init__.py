"""Escape-time field generation with static parallel partitioning."""

__version__ = "1.0.0"

# Core computation and config - lightweight, imported by MPI ranks
from .computation import compute_chunk, escape_time
from .config import RenderConfig, default_render_config, load_config, validate_config
from .errors import (
    ComputationError,
    ConfigurationError,
    InvalidGeometryError,
    MandelfieldError,
    OutputError,
)
from .field import generate_field, generate_field_report
from .geometry import Point, Size, Window, pixel_to_point, pixel_to_window_coordinate, point_to_index
from .palette import color_for, colorize_field
from .report import FieldReport
from .scheduling import ChunkRange, StaticScheduler


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "run_mpi_field":
        from .mpi import run_mpi_field

        return run_mpi_field
    elif name == "log_to_mlflow":
        from .logging import log_to_mlflow

        return log_to_mlflow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ChunkRange",
    "ComputationError",
    "ConfigurationError",
    "FieldReport",
    "InvalidGeometryError",
    "MandelfieldError",
    "OutputError",
    "Point",
    "RenderConfig",
    "Size",
    "StaticScheduler",
    "Window",
    "color_for",
    "colorize_field",
    "compute_chunk",
    "default_render_config",
    "escape_time",
    "generate_field",
    "generate_field_report",
    "load_config",
    "log_to_mlflow",
    "pixel_to_point",
    "pixel_to_window_coordinate",
    "point_to_index",
    "run_mpi_field",
    "validate_config",
]
