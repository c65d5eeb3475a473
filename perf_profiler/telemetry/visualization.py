"""Off-screen chart rendering for sample histories and frame-drop heatmaps.

Uses matplotlib with the Agg backend to produce RGBA pixel buffers or PNG
files. Designed to stay headless-friendly so exports work on CI machines.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib
import numpy as np

# Force headless-friendly backend (Agg) regardless of global defaults.
matplotlib.use("Agg", force=True)
from matplotlib import pyplot as plt

from perf_profiler.telemetry.errors import EmptyBufferOperation, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from perf_profiler.telemetry.models import Sample


DEFAULT_PANEL_METRICS = ("fps", "memory_mb", "draw_calls")
_RED = np.array([1.0, 0.0, 0.0])
_GREEN = np.array([0.0, 1.0, 0.0])


def sample_series(samples: Sequence[Sample], metrics: Sequence[str]) -> dict[str, list[float]]:
    """Extract per-metric series from samples; undefined values become NaN."""

    series: dict[str, list[float]] = {}
    for metric in metrics:
        values: list[float] = []
        for sample in samples:
            value = getattr(sample, metric, None)
            values.append(float("nan") if value is None else float(value))
        series[metric] = values
    return series


def heatmap_colors(samples: Sequence[Sample], fps_threshold: float) -> np.ndarray:
    """Colour each sample red to green by ``fps / (2 * fps_threshold)``.

    Returns:
        np.ndarray: Float array shaped ``(N, 3)`` with RGB components in ``[0, 1]``.
    """
    if fps_threshold <= 0:
        raise ValidationError("fps_threshold must be positive", context={"fps": fps_threshold})
    fps = np.asarray(
        [np.nan if sample.fps is None else sample.fps for sample in samples], dtype=float
    )
    t = np.clip(np.nan_to_num(fps / (fps_threshold * 2.0), nan=0.0), 0.0, 1.0)
    return _RED + (_GREEN - _RED) * t[:, np.newaxis]


def render_fps_heatmap(
    samples: Sequence[Sample],
    fps_threshold: float,
    out_path: str | Path,
    *,
    width: int = 500,
    height: int = 50,
    dpi: int = 100,
) -> Path:
    """Write a timeline strip where each sample is one coloured cell.

    Returns:
        Path: The written PNG.
    """
    if not samples:
        raise EmptyBufferOperation("No samples to render", advice="Capture samples first.")
    _check_size(width, height)
    colors = heatmap_colors(samples, fps_threshold)
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.imshow(colors[np.newaxis, :, :], aspect="auto", interpolation="nearest")
    ax.set_axis_off()
    target = Path(out_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(target, dpi=dpi)
    plt.close(fig)
    return target


def render_metric_panel(
    series: Mapping[str, Sequence[float]],
    metrics: Sequence[str] | None = None,
    *,
    width: int = 640,
    height: int = 360,
    dpi: int = 100,
) -> np.ndarray:
    """Render stacked line charts for the requested metrics and return an RGBA image array.

    Args:
        series: Mapping from metric name to numeric sequence (newest last).
        metrics: Metrics to render (defaults to fps, memory and draw calls).
        width: Target panel width in pixels.
        height: Target panel height in pixels.
        dpi: Matplotlib DPI; combined with width/height to size the figure.

    Returns:
        NumPy uint8 array shaped (H, W, 4) in RGBA order.
    """
    metrics = tuple(metrics or DEFAULT_PANEL_METRICS)
    _check_size(width, height)

    if len(metrics) == 0:
        return np.zeros((height, width, 4), dtype=np.uint8)

    fig, axes = plt.subplots(len(metrics), 1, figsize=(width / dpi, height / dpi), dpi=dpi)
    axes = np.atleast_1d(axes)

    for ax, metric in zip(axes, metrics, strict=False):
        values = np.asarray(series.get(metric, []), dtype=float)
        ax.plot(np.arange(values.shape[0], dtype=float), values, label=metric, linewidth=1.3)
        ax.set_title(metric)
        ax.grid(True, linestyle="--", alpha=0.2)
        ax.tick_params(labelsize=8)
    fig.tight_layout()

    fig.canvas.draw()
    rgba = np.asarray(fig.canvas.buffer_rgba(), dtype=np.uint8).copy()
    # Pad/crop to requested size if layout adjustments changed canvas size slightly
    rgba = _fit_to_size(rgba, target_height=height, target_width=width)
    plt.close(fig)
    return rgba


def save_metric_panel(
    samples: Sequence[Sample],
    out_path: str | Path,
    metrics: Sequence[str] | None = None,
    *,
    width: int = 640,
    height: int = 360,
) -> Path:
    """Render the history panel for ``samples`` and save it as PNG."""

    metrics = tuple(metrics or DEFAULT_PANEL_METRICS)
    rgba = render_metric_panel(
        sample_series(samples, metrics), metrics, width=width, height=height
    )
    target = Path(out_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(target, rgba)
    return target


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValidationError(
            "width and height must be positive integers",
            context={"width": width, "height": height},
        )


def _fit_to_size(rgba: np.ndarray, *, target_height: int, target_width: int) -> np.ndarray:
    """Pad or crop an RGBA image to an exact size.

    Returns:
        np.ndarray: RGBA array with shape (target_height, target_width, 4).
    """
    h, w, _ = rgba.shape
    if h == target_height and w == target_width:
        return rgba
    canvas = np.zeros((target_height, target_width, 4), dtype=np.uint8)
    copy_h = min(h, target_height)
    copy_w = min(w, target_width)
    canvas[:copy_h, :copy_w] = rgba[:copy_h, :copy_w]
    return canvas
