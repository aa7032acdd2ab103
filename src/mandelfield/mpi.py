"""Static-partition field generation across MPI ranks."""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
from mpi4py import MPI

from .computation import compute_chunk
from .field import check_field_inputs
from .geometry import Size, Window
from .report import FieldReport, chunk_record
from .scheduling import StaticScheduler

__all__ = ["run_mpi_field"]


def _rank_log(rank: int, message: str) -> None:
    """Emit a progress message from a given MPI rank."""
    print(f"[Rank {rank}] {message}", flush=True)


def run_mpi_field(
    size: Size,
    window: Window,
    limit: int,
    *,
    comm: MPI.Intracomm | None = None,
    verbose: bool = False,
) -> FieldReport:
    """Compute the field with one chunk per rank, gathered on rank 0.

    Every rank must call this. Only rank 0 receives the field and timing;
    the other ranks get a report with ``field=None``.
    """
    comm = comm if comm is not None else MPI.COMM_WORLD
    rank = comm.Get_rank()
    size_ranks = comm.Get_size()

    check_field_inputs(size, window, limit)
    scheduler = StaticScheduler(size.total_pixels, size_ranks)
    chunk = scheduler.chunk_for_worker(rank)

    start_time = MPI.Wtime()
    data = compute_chunk(size, window, limit, chunk)
    comp_time = MPI.Wtime() - start_time
    if verbose:
        _rank_log(rank, f"Computed pixels {chunk.start}:{chunk.end} in {comp_time:.4f}s")

    record = chunk_record(rank, chunk.start, chunk.end, comp_time)
    gathered = comm.gather((data, record), root=0)
    wall_time = MPI.Wtime() - start_time

    if rank != 0:
        return FieldReport(None, {}, None)

    field = np.concatenate([part for part, _ in gathered])
    field.flags.writeable = False
    chunks: List[Dict[str, Any]] = [rec for _, rec in gathered]
    timing = {
        "wall_time": wall_time,
        "comp_total": sum(rec["comp_time"] for rec in chunks),
        "total_chunks": len(chunks),
        "chunk_size": scheduler.chunk_size,
        "worker_count": size_ranks,
        "total_pixels": size.total_pixels,
    }
    return FieldReport(field, timing, chunks)
