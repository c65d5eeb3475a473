"""Tests for the perf-profiler command-line tools."""

from __future__ import annotations

import pytest
from loguru import logger

from perf_profiler.cli import cli_main
from perf_profiler.telemetry.csv_codec import export_samples
from perf_profiler.telemetry.models import Sample


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger.remove()


def _export(path, fps_values):
    return export_samples(
        [Sample(time=0.5 * i, fps=fps) for i, fps in enumerate(fps_values)], path
    )


def test_compare_prints_one_row_per_dataset(tmp_path, capsys) -> None:
    pc = _export(tmp_path / "pc.csv", [120.0, 100.0])
    phone = _export(tmp_path / "phone.csv", [30.0, 20.0])
    assert cli_main(["compare", str(pc), str(phone), "--label", "PC", "--label", "Phone"]) == 0
    out = capsys.readouterr().out
    assert "PC" in out and "Phone" in out
    assert "110.0" in out
    assert "25.0" in out


def test_compare_label_count_mismatch(tmp_path) -> None:
    pc = _export(tmp_path / "pc.csv", [60.0])
    assert cli_main(["compare", str(pc), "--label", "a", "--label", "b"]) == 2


def test_compare_without_rows_fails(tmp_path) -> None:
    empty = tmp_path / "empty.csv"
    empty.write_text("time,fps\n", encoding="utf-8")
    assert cli_main(["compare", str(empty)]) == 1


def test_heatmap_command(tmp_path) -> None:
    source = _export(tmp_path / "samples.csv", [10.0, 30.0, 60.0])
    out = tmp_path / "heatmap.png"
    assert cli_main(["heatmap", str(source), "--out", str(out)]) == 0
    assert out.exists()


def test_missing_file_returns_error(tmp_path) -> None:
    assert cli_main(["heatmap", str(tmp_path / "nope.csv"), "--out", str(tmp_path / "x.png")]) == 1


def test_no_command_prints_help(capsys) -> None:
    assert cli_main([]) == 2
    assert "usage" in capsys.readouterr().out
