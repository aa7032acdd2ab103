"""Parallel field generation."""

import math

import numpy as np
import pytest

import mandelfield.field as field_module
from mandelfield.errors import ComputationError, ConfigurationError, InvalidGeometryError
from mandelfield.field import generate_field, generate_field_report
from mandelfield.geometry import Point, Size, Window

WINDOW = Window(Point(-2.2, -1.3), Size(2.95, 2.6))


def test_corners_escape_and_origin_is_in_set():
    size = Size(4.0, 4.0)
    window = Window(Point(-2.0, -2.0), Size(4.0, 4.0))
    limit = 50

    field = generate_field(size, window, limit, 4)

    assert field.shape == (16,)
    for corner in (0, 3, 12, 15):
        assert field[corner] < 5
    # Pixel (2, 2) maps to window coordinate (0, 0).
    assert field[2 * 4 + 2] == limit


@pytest.mark.parametrize("workers", [1, 2, 7])
def test_worker_count_does_not_change_field(workers):
    size = Size(37.0, 23.0)
    reference = generate_field(size, WINDOW, 80, 1)
    field = generate_field(size, WINDOW, 80, workers)
    np.testing.assert_array_equal(field, reference)


def test_field_length_and_bounds():
    size = Size(31.7, 12.4)
    limit = 60
    field = generate_field(size, WINDOW, limit, 3)
    assert field.shape == (31 * 12,)
    assert field.dtype == np.uint32
    assert field.min() >= 0
    assert field.max() <= limit


def test_field_is_read_only():
    field = generate_field(Size(5.0, 5.0), WINDOW, 10, 2)
    with pytest.raises(ValueError):
        field[0] = 1


@pytest.mark.parametrize("size", [Size(0.0, 10.0), Size(10.0, 0.0), Size(0.4, 0.4)])
def test_degenerate_size_gives_empty_field(size):
    field = generate_field(size, WINDOW, 10, 3)
    assert field.shape == (0,)


def test_more_workers_than_pixels():
    size = Size(2.0, 2.0)
    np.testing.assert_array_equal(
        generate_field(size, WINDOW, 25, 9),
        generate_field(size, WINDOW, 25, 1),
    )


def test_auto_detected_worker_count():
    report = generate_field_report(Size(6.0, 6.0), WINDOW, 10)
    assert report.timing["worker_count"] >= 1
    assert report.field.shape == (36,)


def test_report_chunk_records():
    report = generate_field_report(Size(10.0, 10.0), WINDOW, 20, 3)
    chunks = report.copy_chunks()
    assert [c["worker"] for c in chunks] == [0, 1, 2]
    assert [(c["start"], c["end"]) for c in chunks] == [(0, 34), (34, 68), (68, 100)]
    assert sum(c["pixels"] for c in chunks) == 100
    assert report.timing["chunk_size"] == 34
    assert report.timing["total_chunks"] == 3


def test_invalid_worker_count():
    with pytest.raises(ConfigurationError):
        generate_field(Size(4.0, 4.0), WINDOW, 10, 0)


def test_negative_size():
    with pytest.raises(InvalidGeometryError):
        generate_field(Size(-4.0, 4.0), WINDOW, 10, 1)


@pytest.mark.parametrize("bad", [math.nan, math.inf])
def test_non_finite_window(bad):
    window = Window(Point(bad, 0.0), Size(1.0, 1.0))
    with pytest.raises(ComputationError):
        generate_field(Size(4.0, 4.0), window, 10, 2)


def test_worker_failure_aborts_generation(monkeypatch):
    real_compute_chunk = field_module.compute_chunk

    def failing_compute_chunk(size, window, limit, chunk):
        if chunk.worker == 1:
            raise FloatingPointError("boom")
        return real_compute_chunk(size, window, limit, chunk)

    monkeypatch.setattr(field_module, "compute_chunk", failing_compute_chunk)
    with pytest.raises(FloatingPointError):
        generate_field(Size(8.0, 8.0), WINDOW, 10, 3)
