"""MLflow run logging against a local SQLite tracking store."""

import mlflow
import pytest

from mandelfield.config import default_render_config
from mandelfield.field import generate_field_report
from mandelfield.logging import log_to_mlflow
from mandelfield.palette import colorize_field


@pytest.fixture
def tracking_store(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SKIP_MLFLOW", raising=False)
    monkeypatch.setenv("MLFLOW_TRACKING_URI", f"sqlite:///{tmp_path / 'm.db'}")
    monkeypatch.setenv("MANDELFIELD_EXPERIMENT", "mandelfield-test")
    return tmp_path / "m.db"


def test_log_to_mlflow_records_metrics_and_chunks(tracking_store):
    config = default_render_config(ppu=4, limit=30, workers=2)
    size = config.image_size
    report = generate_field_report(size, config.window, config.limit, config.workers)
    image = colorize_field(
        report.field, size.grid_width, size.grid_height,
        config.limit, config.color_steps, config.color_palette,
    )

    log_to_mlflow(config, report, image)

    runs = mlflow.search_runs(experiment_names=["mandelfield-test"])
    assert len(runs) == 1
    run = runs.iloc[0]
    expected_fraction = float((report.field == config.limit).mean())
    assert run["metrics.in_set_fraction"] == pytest.approx(expected_fraction)
    assert run["metrics.total_pixels"] == size.total_pixels
    assert run["params.limit"] == "30"

    artifacts = {a.path for a in mlflow.MlflowClient().list_artifacts(run["run_id"])}
    assert "chunks.json" in artifacts
    assert "figures" in artifacts


def test_skip_mlflow_logs_nothing(tracking_store, monkeypatch):
    monkeypatch.setenv("SKIP_MLFLOW", "1")
    monkeypatch.setenv("MANDELFIELD_EXPERIMENT", "mandelfield-skipped")
    config = default_render_config(ppu=2, limit=10, workers=1)
    report = generate_field_report(config.image_size, config.window, config.limit, 1)

    log_to_mlflow(config, report)

    mlflow.set_tracking_uri(f"sqlite:///{tracking_store}")
    assert mlflow.get_experiment_by_name("mandelfield-skipped") is None
