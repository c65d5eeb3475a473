"""Tests for the CSV export/import format and the KPI report."""

from __future__ import annotations

import pytest

from perf_profiler.telemetry.csv_codec import (
    EXPORT_HEADER,
    export_samples,
    import_samples,
    write_kpi_report,
)
from perf_profiler.telemetry.kpi import KPIThresholds
from perf_profiler.telemetry.models import Sample, fps_from_frame_delta


def _samples() -> list[Sample]:
    return [
        Sample(time=0.0, fps=59.9, memory_mb=120.04, draw_calls=80, static_batches=4),
        Sample(time=0.5, fps=30.0, memory_mb=121.5, draw_calls=95, static_batches=5),
        Sample(time=1.004, fps=12.5, memory_mb=130.0, draw_calls=140, static_batches=6),
    ]


def test_export_writes_header_and_fixed_precision_rows(tmp_path) -> None:
    path = export_samples(_samples(), tmp_path / "samples.csv")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(EXPORT_HEADER) == "time,fps,memMB,drawCalls,staticBatches"
    assert lines[1:] == [
        "0.00,59.9,120.0,80,4",
        "0.50,30.0,121.5,95,5",
        "1.00,12.5,130.0,140,6",
    ]


def test_round_trip_preserves_fps_only(tmp_path) -> None:
    original = _samples()
    path = export_samples(original, tmp_path / "samples.csv")
    imported = import_samples(path)
    assert [s.fps for s in imported] == [s.fps for s in original]
    # Import reads the fps column only; everything else keeps its default.
    assert all(
        (s.time, s.memory_mb, s.draw_calls, s.static_batches) == (0.0, 0.0, 0, 0)
        for s in imported
    )


def test_malformed_rows_are_skipped(tmp_path) -> None:
    path = tmp_path / "android.csv"
    path.write_text(
        "time,fps,memMB\n"
        "0.00,60.0,10\n"
        "0.50,abc,10\n"
        "lonely\n"
        "\n"
        "1.00, 45.5 ,11\n",
        encoding="utf-8",
    )
    assert [s.fps for s in import_samples(path)] == [60.0, 45.5]


def test_header_only_file_imports_nothing(tmp_path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("time,fps\n", encoding="utf-8")
    assert import_samples(path) == []


def test_undefined_fps_round_trips_as_undefined(tmp_path) -> None:
    path = export_samples(
        [Sample(time=0.0, fps=None), Sample(time=0.5, fps=20.0)], tmp_path / "s.csv"
    )
    assert path.read_text(encoding="utf-8").splitlines()[1] == "0.00,nan,0.0,0,0"
    assert [s.fps for s in import_samples(path)] == [None, 20.0]


def test_kpi_report_lists_latest_values_and_custom_kpis(tmp_path) -> None:
    thresholds = KPIThresholds()
    thresholds.add_custom("loadTimeSec", 2.5)
    sample = Sample(time=3.0, fps=58.25, memory_mb=1.0, draw_calls=7, dynamic_batches=2)
    path = write_kpi_report(tmp_path / "report.csv", sample, thresholds)
    assert path.read_text(encoding="utf-8").splitlines() == [
        "Metric,Value",
        "FPS,58.2",
        "Memory,1048576",
        "DrawCalls,7",
        "StaticBatches,0",
        "DynamicBatches,2",
        "custom:loadTimeSec,2.5",
    ]


def test_kpi_report_without_samples_leaves_values_empty(tmp_path) -> None:
    path = write_kpi_report(tmp_path / "report.csv", None)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "FPS,"
    assert len(lines) == 6


def test_round_trip_keeps_frame_delta_fps_to_one_decimal(tmp_path) -> None:
    fps = fps_from_frame_delta(0.017)
    path = export_samples([Sample(time=0.0, fps=fps)], tmp_path / "frames.csv")
    (imported,) = import_samples(path)
    assert imported.fps == 58.8
    assert imported.fps == pytest.approx(fps, abs=0.05)


def test_undecodable_row_is_skipped(tmp_path) -> None:
    path = tmp_path / "ios.csv"
    path.write_bytes(b"time,fps\n0.00,60.0\n0.50,\xff\xfe,1\n1.00,45.0\n")
    assert [s.fps for s in import_samples(path)] == [60.0, 45.0]
