"""Static partitioning of the pixel index range across workers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ChunkRange:
    """Half-open pixel index range ``[start, end)`` owned by one worker."""

    worker: int
    start: int
    end: int

    @property
    def pixels(self) -> int:
        return max(self.end - self.start, 0)


@dataclass
class StaticScheduler:
    """Pre-assigns one contiguous chunk to each worker.

    Every worker receives ``ceil(total_pixels / worker_count)`` indices except
    the last non-empty one, which is clamped to ``total_pixels``. Workers past
    the end of the grid receive empty ranges.
    """

    total_pixels: int
    worker_count: int
    chunks: List[ChunkRange] = field(init=False)

    def __post_init__(self) -> None:
        if self.worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {self.worker_count}")
        if self.total_pixels < 0:
            raise ValueError(f"total_pixels must be >= 0, got {self.total_pixels}")

        size = self.chunk_size
        self.chunks = []
        for worker in range(self.worker_count):
            start = min(worker * size, self.total_pixels)
            end = min(start + size, self.total_pixels)
            if worker == self.worker_count - 1:
                end = self.total_pixels
            self.chunks.append(ChunkRange(worker, start, end))

    @property
    def chunk_size(self) -> int:
        return -(-self.total_pixels // self.worker_count)

    def chunk_for_worker(self, worker: int) -> ChunkRange:
        """Get the chunk assigned to a specific worker."""
        return self.chunks[worker]
