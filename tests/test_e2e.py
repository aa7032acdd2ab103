"""End-to-end tests via main.py."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from matplotlib import pyplot as plt

ROOT = Path(__file__).resolve().parents[1]

CONFIG = {
    "ppu": 10,
    "limit": 60,
    "color_steps": 16,
    "color_components": 3,
    "color_palette": [[0, 7, 100], [32, 107, 203], [237, 255, 255], [255, 170, 0], [0, 2, 0]],
    "window": {"origin": {"x": -2.5, "y": -1.25}, "size": {"width": 3.5, "height": 2.5}},
}


def _run(*args):
    env = {
        **os.environ,
        "SKIP_MLFLOW": "1",
        "MPLBACKEND": "Agg",
        "PYTHONPATH": os.pathsep.join(filter(None, [str(ROOT / "src"), os.environ.get("PYTHONPATH")])),
    }
    return subprocess.run(
        [sys.executable, str(ROOT / "main.py"), *args],
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "render.json"
    path.write_text(json.dumps(CONFIG))
    return path


def test_render_writes_image(config_path):
    result = _run("--config", str(config_path), "--workers", "3")

    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"
    output = config_path.with_suffix(".png")
    assert output.exists()
    assert plt.imread(output).shape[:2] == (25, 35)
    assert "[Timing] Generation" in result.stdout


def test_output_palette(config_path):
    result = _run("--config", str(config_path), "--output-palette")

    assert result.returncode == 0, f"Palette failed:\n{result.stdout}\n{result.stderr}"
    output = config_path.with_name("render-palette.png")
    assert plt.imread(output).shape[:2] == (100, 500)
    assert not config_path.with_suffix(".png").exists()


def test_invalid_config_exits_with_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({**CONFIG, "limit": 20_000}))

    result = _run("--config", str(path))

    assert result.returncode == 1
    assert "limit is over" in result.stderr
    assert not path.with_suffix(".png").exists()


def test_unsupported_output_format(config_path, tmp_path):
    output = tmp_path / "out.ppm"
    result = _run("--config", str(config_path), "--output", str(output))

    assert result.returncode == 1
    assert "unsupported image format 'ppm'" in result.stderr
    assert "Traceback" not in result.stderr
    assert not output.exists()
