"""Canonical telemetry data models.

These dataclasses define the sample, asset and scenario records shared by the
sampler, the scenario runner, the CSV codec and the session facade. ``None``
is used throughout as the "undefined" sentinel (e.g. an fps reading taken on a
zero-length frame, or an average over an empty buffer).
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

BYTES_PER_MB = 1024 * 1024


class ScenarioStatus(StrEnum):
    """Lifecycle states of a scenario run."""

    IDLE = "idle"
    LOADING = "loading"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Sample:
    """One timestamped reading of the performance counters."""

    time: float
    fps: float | None = None
    memory_mb: float = 0.0
    draw_calls: int = 0
    static_batches: int = 0
    dynamic_batches: int = 0

    @property
    def memory_bytes(self) -> float:
        return self.memory_mb * BYTES_PER_MB

    @property
    def fps_defined(self) -> bool:
        return self.fps is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class MetricsReading:
    """Raw counters returned by a metrics source for one poll.

    ``frame_delta_seconds`` takes precedence over ``fps`` when present so
    sources that only know the frame time can defer the division to the
    sampler, which guards the zero-delta case.
    """

    fps: float | None = None
    memory_bytes: int = 0
    draw_calls: int = 0
    static_batches: int = 0
    dynamic_batches: int = 0
    frame_delta_seconds: float | None = None


@dataclass(slots=True)
class AssetStat:
    """Per-asset draw-call and memory rollup for one aggregation pass."""

    name: str
    draw_calls: int = 0
    memory_bytes: int = 0

    @property
    def memory_kb(self) -> float:
        return self.memory_bytes / 1024.0

    @property
    def memory_mb(self) -> float:
        return self.memory_bytes / float(BYTES_PER_MB)


@dataclass(frozen=True, slots=True)
class AssetUsage:
    """One renderable instance referencing an asset (``asset_id`` may be missing)."""

    asset_id: str | None
    memory_bytes: int = 0


@dataclass(frozen=True, slots=True)
class KPIWarning:
    """A threshold breach reported by the KPI evaluator."""

    metric: str
    observed: float
    threshold: float
    message: str


@dataclass(frozen=True, slots=True)
class ScenarioSummary:
    """Summary statistics emitted when a scenario run completes."""

    target_id: str
    duration_seconds: float
    sample_count: int
    avg_fps: float | None
    avg_memory_mb: float | None
    min_fps: float | None = None
    max_memory_mb: float | None = None

    def describe(self) -> str:
        """Human readable one-block summary used by dashboards and logs."""

        return "\n".join(
            (
                f"Scene: {self.target_id}",
                f"Avg FPS: {_fmt(self.avg_fps)}",
                f"Avg Mem: {_fmt(self.avg_memory_mb)} MB",
            )
        )


@dataclass(slots=True)
class ScenarioRun:
    """Working state of the active scenario run."""

    target_id: str | None = None
    duration_seconds: float = 0.0
    start_time: float | None = None
    status: ScenarioStatus = ScenarioStatus.IDLE
    collected_samples: list[Sample] = field(default_factory=list)
    summary: ScenarioSummary | None = None
    error: dict[str, object] | None = None

    def elapsed(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        return max(now - self.start_time, 0.0)


def sanitize_fps(value: float | None) -> float | None:
    """Map non-finite or negative fps readings to the undefined sentinel."""

    if value is None:
        return None
    value = float(value)
    if not math.isfinite(value) or value < 0.0:
        return None
    return value


def fps_from_frame_delta(delta_seconds: float | None) -> float | None:
    """Return ``1 / delta`` or ``None`` when the frame delta is zero or invalid."""

    if delta_seconds is None:
        return None
    delta = float(delta_seconds)
    if not math.isfinite(delta) or delta <= 0.0:
        return None
    return sanitize_fps(1.0 / delta)


def _fmt(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1f}"


__all__ = [
    "BYTES_PER_MB",
    "AssetStat",
    "AssetUsage",
    "KPIWarning",
    "MetricsReading",
    "Sample",
    "ScenarioRun",
    "ScenarioStatus",
    "ScenarioSummary",
    "fps_from_frame_delta",
    "sanitize_fps",
]
