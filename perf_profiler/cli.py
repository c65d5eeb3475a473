"""Command-line tools for exported sample files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from perf_profiler.common.logging import configure_logging
from perf_profiler.telemetry.comparison import ComparisonSet
from perf_profiler.telemetry.csv_codec import import_samples
from perf_profiler.telemetry.errors import TelemetryError
from perf_profiler.telemetry.visualization import render_fps_heatmap


def _fmt(value: float | int | None) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, int):
        return str(value)
    return f"{value:.1f}"


def _handle_compare(args) -> int:
    labels = list(args.label or [])
    if labels and len(labels) != len(args.files):
        print("--label must be given once per file", file=sys.stderr)
        return 2
    comparison = ComparisonSet()
    for index, path in enumerate(args.files):
        label = labels[index] if labels else None
        comparison.load_csv(path, label)
    summary = comparison.summary()
    if not any(entry["samples"] for entry in summary.values()):
        logger.error("No rows could be imported from {}", ", ".join(map(str, args.files)))
        return 1
    print(f"{'dataset':<24}{'samples':>8}{'latest':>9}{'mean':>9}{'min':>9}{'max':>9}")
    for label, entry in summary.items():
        print(
            f"{label:<24}{entry['samples']:>8}"
            f"{_fmt(entry['latest_fps']):>9}{_fmt(entry['mean_fps']):>9}"
            f"{_fmt(entry['min_fps']):>9}{_fmt(entry['max_fps']):>9}"
        )
    return 0


def _handle_heatmap(args) -> int:
    samples = import_samples(args.file)
    if not samples:
        logger.error("No rows could be imported from {}", args.file)
        return 1
    target = render_fps_heatmap(
        samples, args.fps_threshold, args.out, width=args.width, height=args.height
    )
    logger.info("Heatmap written to {}", target)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perf-profiler", description="Inspect exported performance samples"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    compare = sub.add_parser("compare", help="Summarize fps across exported datasets")
    compare.add_argument("files", nargs="+", type=Path, help="CSV files to compare")
    compare.add_argument(
        "--label",
        action="append",
        help="Dataset label per file (defaults to the file name without extension)",
    )

    heatmap = sub.add_parser("heatmap", help="Render a frame-drop heatmap from a CSV export")
    heatmap.add_argument("file", type=Path, help="CSV export to render")
    heatmap.add_argument("--out", type=Path, required=True, help="Destination PNG")
    heatmap.add_argument("--fps-threshold", type=float, default=30.0)
    heatmap.add_argument("--width", type=int, default=500)
    heatmap.add_argument("--height", type=int, default=50)
    return parser


def cli_main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    handlers = {
        "compare": _handle_compare,
        "heatmap": _handle_heatmap,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        parser.print_help()
        return 2
    try:
        return handler(args)
    except (TelemetryError, OSError) as exc:
        logger.error("{}", exc)
        return 1


def main() -> None:  # pragma: no cover - thin wrapper
    raise SystemExit(cli_main())


__all__ = ["cli_main", "main"]
