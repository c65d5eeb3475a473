"""Flat CSV exchange format for sample streams.

Export writes five columns (``time,fps,memMB,drawCalls,staticBatches``) with
fixed precision. Import only reads the fps column (index 1); every other
field of the imported samples stays at its default. This asymmetry is part of
the file format: files produced by other tools only have to agree on the
position of the fps column.
"""

from __future__ import annotations

import csv
import math
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from perf_profiler.telemetry.errors import MalformedRecord
from perf_profiler.telemetry.models import Sample

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Iterable, Sequence

    from perf_profiler.telemetry.kpi import KPIThresholds

EXPORT_HEADER = ("time", "fps", "memMB", "drawCalls", "staticBatches")
REPORT_HEADER = ("Metric", "Value")
FPS_COLUMN = 1
UNDEFINED_FPS_TOKEN = "nan"


def format_row(sample: Sample) -> list[str]:
    """Format one sample as an export row."""

    fps = UNDEFINED_FPS_TOKEN if sample.fps is None else f"{sample.fps:.1f}"
    return [
        f"{sample.time:.2f}",
        fps,
        f"{sample.memory_mb:.1f}",
        str(sample.draw_calls),
        str(sample.static_batches),
    ]


def export_samples(samples: Iterable[Sample], path: str | Path) -> Path:
    """Write ``samples`` (already in time order) to ``path``.

    Returns:
        Path: The written file.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with target.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(EXPORT_HEADER)
        for sample in samples:
            writer.writerow(format_row(sample))
            count += 1
    logger.info("Exported {} samples to {}", count, target)
    return target


def parse_row(fields: Sequence[str]) -> Sample:
    """Parse the fps column of an imported row.

    Raises:
        MalformedRecord: Too few columns or a non-numeric fps field.
    """
    if len(fields) <= FPS_COLUMN:
        raise MalformedRecord("Row has no fps column", context={"columns": len(fields)})
    raw = fields[FPS_COLUMN].strip()
    try:
        fps = float(raw)
    except ValueError as exc:
        raise MalformedRecord(f"fps value {raw!r} is not numeric") from exc
    return Sample(time=0.0, fps=fps if math.isfinite(fps) else None)


def import_samples(path: str | Path) -> list[Sample]:
    """Read fps-only samples from ``path``, skipping the header and malformed rows.

    Undecodable bytes are replaced rather than raised, so a corrupt row fails
    numeric parsing and is skipped like any other malformed record.
    """

    source = Path(path)
    samples: list[Sample] = []
    skipped = 0
    with source.open("r", encoding="utf-8", errors="replace", newline="") as handle:
        reader = csv.reader(handle)
        next(reader, None)
        for line_no, fields in enumerate(reader, start=2):
            try:
                samples.append(parse_row(fields))
            except MalformedRecord as exc:
                skipped += 1
                logger.debug("Skipping {}:{}: {}", source.name, line_no, exc.message)
    logger.info("Imported {} samples from {} ({} rows skipped)", len(samples), source, skipped)
    return samples


def write_kpi_report(
    path: str | Path, sample: Sample | None, thresholds: KPIThresholds | None = None
) -> Path:
    """Write a ``Metric,Value`` report of the latest sample and custom KPIs.

    Returns:
        Path: The written file.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    rows: list[tuple[str, str]] = [
        ("FPS", _report_value(None if sample is None else sample.fps, "{:.1f}")),
        ("Memory", _report_value(None if sample is None else sample.memory_bytes, "{:.0f}")),
        ("DrawCalls", _report_value(None if sample is None else sample.draw_calls, "{}")),
        ("StaticBatches", _report_value(None if sample is None else sample.static_batches, "{}")),
        (
            "DynamicBatches",
            _report_value(None if sample is None else sample.dynamic_batches, "{}"),
        ),
    ]
    if thresholds is not None:
        rows.extend((f"custom:{name}", f"{value:g}") for name, value in thresholds.custom.items())
    with target.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(REPORT_HEADER)
        writer.writerows(rows)
    logger.info("KPI report saved to {}", target)
    return target


def _report_value(value: float | int | None, fmt: str) -> str:
    return "" if value is None else fmt.format(value)
