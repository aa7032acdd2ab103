"""MLflow logging for rendered fields."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Sequence

import mlflow
import numpy as np
import pandas as pd
from matplotlib import pyplot as plt

from .config import RenderConfig
from .report import FieldReport

EXPERIMENT_NAME = "mandelfield"


def tracking_enabled() -> bool:
    return not os.environ.get("SKIP_MLFLOW")


def log_to_mlflow(
    config: RenderConfig,
    report: FieldReport,
    image: Optional[np.ndarray] = None,
    *,
    backend: str = "threads",
) -> None:
    """Log a render to MLflow with its chunk table, timing metrics and image.

    Does nothing when ``SKIP_MLFLOW`` is set.
    """
    if not tracking_enabled():
        return

    tracking_uri = _resolve_tracking_uri()
    if tracking_uri:
        mlflow.set_tracking_uri(tracking_uri)
    mlflow.set_experiment(os.environ.get("MANDELFIELD_EXPERIMENT") or EXPERIMENT_NAME)

    with mlflow.start_run(run_name=config.run_name) as run:
        mlflow.set_tags({"node_name": os.uname().nodename, "backend": backend})
        mlflow.log_params(config.to_dict())

        chunk_records = report.copy_chunks()
        if chunk_records:
            mlflow.log_table(_records_to_table(chunk_records), "chunks.json")

        timing = report.timing or {}
        metrics = {
            "wall_time": float(timing.get("wall_time", 0.0)),
            "comp_total": float(timing.get("comp_total", 0.0)),
            "total_chunks": float(timing.get("total_chunks", 0)),
            "total_pixels": float(timing.get("total_pixels", 0)),
        }
        if report.field is not None and report.field.size:
            metrics["in_set_fraction"] = float(np.mean(report.field == config.limit))
        mlflow.log_metrics(metrics)

        if image is not None and image.size:
            fig, ax = plt.subplots(figsize=(6, 6))
            ax.imshow(image)
            ax.axis("off")
            mlflow.log_figure(fig, "figures/field.png")
            plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name}")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(chunk_records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise chunk records into MLflow table format."""

    frame = pd.DataFrame.from_records(chunk_records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> Optional[str]:
    return os.environ.get("MLFLOW_TRACKING_URI")
