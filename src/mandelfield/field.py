"""Parallel generation of the escape-time field on a thread pool."""

from __future__ import annotations

import math
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .computation import compute_chunk
from .errors import ComputationError, ConfigurationError, InvalidGeometryError
from .geometry import Size, Window
from .report import FieldReport, chunk_record
from .scheduling import ChunkRange, StaticScheduler

__all__ = ["resolve_worker_count", "generate_field", "generate_field_report"]


def _field_log(message: str) -> None:
    print(f"[Field] {message}", flush=True)


def resolve_worker_count(worker_count: Optional[int] = None) -> int:
    """Return ``worker_count`` or the number of CPUs when it is ``None``."""
    if worker_count is None:
        return os.cpu_count() or 1
    if int(worker_count) < 1:
        raise ConfigurationError(f"worker count must be >= 1, got {worker_count}")
    return int(worker_count)


def check_field_inputs(size: Size, window: Window, limit: int) -> None:
    """Reject inputs that cannot produce a well-defined field."""
    if not (math.isfinite(size.width) and math.isfinite(size.height)):
        raise InvalidGeometryError(f"pixel size must be finite, got {size.width}x{size.height}")
    if size.width < 0 or size.height < 0:
        raise InvalidGeometryError(f"pixel size must be non-negative, got {size.width}x{size.height}")
    if not window.is_finite():
        raise ComputationError(f"window contains non-finite values: {window}")
    if limit < 0:
        raise ConfigurationError(f"limit must be >= 0, got {limit}")


def _compute_chunk_timed(
    size: Size,
    window: Window,
    limit: int,
    chunk: ChunkRange,
    verbose: bool,
) -> Tuple[np.ndarray, float]:
    t0 = time.perf_counter()
    data = compute_chunk(size, window, limit, chunk)
    elapsed = time.perf_counter() - t0
    if verbose:
        _field_log(
            f"Worker {chunk.worker} computed pixels {chunk.start}:{chunk.end} in {elapsed:.4f}s"
        )
    return data, elapsed


def generate_field_report(
    size: Size,
    window: Window,
    limit: int,
    worker_count: Optional[int] = None,
    *,
    verbose: bool = False,
) -> FieldReport:
    """Compute the field and collect per-chunk timing."""
    check_field_inputs(size, window, limit)
    workers = resolve_worker_count(worker_count)
    scheduler = StaticScheduler(size.total_pixels, workers)

    if verbose:
        _field_log(
            f"Data size: {size.total_pixels}, chunk size: {scheduler.chunk_size}, "
            f"workers: {workers}"
        )

    start_time = time.perf_counter()
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="field") as pool:
        futures = [
            pool.submit(_compute_chunk_timed, size, window, limit, chunk, verbose)
            for chunk in scheduler.chunks
        ]
        # Joined in worker order; the first failure propagates and nothing is returned.
        results = [future.result() for future in futures]
    wall_time = time.perf_counter() - start_time

    field = np.concatenate([data for data, _ in results])
    field.flags.writeable = False

    chunks: List[Dict[str, Any]] = [
        chunk_record(chunk.worker, chunk.start, chunk.end, elapsed)
        for chunk, (_, elapsed) in zip(scheduler.chunks, results)
    ]
    timing = {
        "wall_time": wall_time,
        "comp_total": sum(elapsed for _, elapsed in results),
        "total_chunks": len(chunks),
        "chunk_size": scheduler.chunk_size,
        "worker_count": workers,
        "total_pixels": size.total_pixels,
    }
    return FieldReport(field, timing, chunks)


def generate_field(
    size: Size,
    window: Window,
    limit: int,
    worker_count: Optional[int] = None,
) -> np.ndarray:
    """Row-major ``uint32`` escape counts for every pixel of ``size``.

    The array has ``int(size.width) * int(size.height)`` entries and is
    read-only.
    """
    return generate_field_report(size, window, limit, worker_count).field
