"""Execution helpers for the render CLI."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

import numpy as np
from matplotlib import pyplot as plt
from matplotlib.backend_bases import FigureCanvasBase

from .config import RenderConfig
from .errors import OutputError
from .field import generate_field_report
from .logging import log_to_mlflow, tracking_enabled
from .palette import colorize_field, palette_swatch
from .report import FieldReport

BACKENDS = ("threads", "mpi")


def default_output_path(config_path: str | Path) -> Path:
    return Path(config_path).with_suffix(".png")


def default_palette_path(config_path: str | Path) -> Path:
    path = Path(config_path)
    return path.with_name(f"{path.stem}-palette.png")


def check_output_path(path: Path) -> None:
    """Raise ``OutputError`` unless matplotlib can write ``path``'s format."""
    suffix = path.suffix.lstrip(".").lower()
    supported = FigureCanvasBase.get_supported_filetypes()
    if suffix and suffix not in supported:
        raise OutputError(
            f"Cannot write {path}: unsupported image format {suffix!r}, "
            f"expected one of {', '.join(sorted(supported))}"
        )


def save_image(path: Path, image: np.ndarray) -> None:
    check_output_path(path)
    try:
        plt.imsave(path, image)
    except (OSError, ValueError) as exc:
        raise OutputError(f"Could not write image to {path}: {exc}") from exc


def render_field(config: RenderConfig, *, backend: str = "threads", verbose: bool = False) -> FieldReport:
    """Generate the field for ``config`` with the selected backend."""
    size = config.image_size
    if backend == "threads":
        return generate_field_report(size, config.window, config.limit, config.workers, verbose=verbose)
    if backend == "mpi":
        from .mpi import run_mpi_field

        return run_mpi_field(size, config.window, config.limit, verbose=verbose)
    raise ValueError(f"Unknown backend {backend!r}, expected one of {BACKENDS}")


def run_render(
    config: RenderConfig,
    config_path: str | Path,
    *,
    output: Optional[str | Path] = None,
    backend: str = "threads",
    verbose: bool = False,
) -> int:
    """Render ``config`` to a PNG next to the config file (or at ``output``)."""
    output_path = Path(output) if output else default_output_path(config_path)
    size = config.image_size
    check_output_path(output_path)

    render_start = time.perf_counter()
    report = render_field(config, backend=backend, verbose=verbose)
    if report.field is None:
        # Non-root MPI rank, rank 0 writes the image.
        return 0

    print(
        f"[Run] Generating image at {output_path} with size "
        f"{size.grid_width}x{size.grid_height}",
        flush=True,
    )
    print(f"[Timing] Generation: {report.timing['wall_time']:.4f}s", flush=True)

    phase_start = time.perf_counter()
    image = colorize_field(
        report.field,
        size.grid_width,
        size.grid_height,
        config.limit,
        config.color_steps,
        config.color_palette,
    )
    if image.size:
        save_image(output_path, image)
    else:
        print("[Run] Empty pixel grid - no image written.", flush=True)
    print(f"[Timing] Render: {time.perf_counter() - phase_start:.4f}s", flush=True)
    print(f"[Timing] Total render: {time.perf_counter() - render_start:.4f}s", flush=True)

    if tracking_enabled():
        print("[Run] Logging to MLflow...", flush=True)
    log_to_mlflow(config, report, image, backend=backend)
    return 0


def run_palette(config: RenderConfig, config_path: str | Path, output: Optional[str | Path] = None) -> int:
    """Write one 100px square per palette color, in order."""
    output_path = Path(output) if output else default_palette_path(config_path)
    check_output_path(output_path)
    print(f"[Run] Generating color palette image at {output_path}", flush=True)
    save_image(output_path, palette_swatch(config.color_palette))
    return 0
