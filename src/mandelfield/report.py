"""Structured results returned from field generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass(frozen=True)
class FieldReport:
    """Container for outputs produced by ``generate_field_report`` and ``run_mpi_field``."""

    field: Optional[np.ndarray]
    timing: Dict[str, Any]
    chunks: Optional[List[Dict[str, Any]]]

    def copy_chunks(self) -> Optional[List[Dict[str, Any]]]:
        if self.chunks is None:
            return None
        return [record.copy() for record in self.chunks]


def chunk_record(worker: int, start: int, end: int, comp_time: float) -> Dict[str, Any]:
    """Create a uniform chunk metadata record."""
    return {
        "worker": int(worker),
        "start": int(start),
        "end": int(end),
        "pixels": int(max(end - start, 0)),
        "comp_time": float(comp_time),
    }
