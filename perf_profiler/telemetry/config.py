"""Configuration for a profiler session."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from perf_profiler.common.artifact_paths import ensure_exports_dir, get_artifact_root
from perf_profiler.telemetry.assets import DEFAULT_BUDGET_LIMIT
from perf_profiler.telemetry.errors import ValidationError
from perf_profiler.telemetry.kpi import KPIThresholds
from perf_profiler.telemetry.recommendations import DEFAULT_DRAW_CALL_CUTOFF
from perf_profiler.telemetry.sampler import DEFAULT_SAMPLE_INTERVAL


@dataclass(slots=True)
class ProfilerConfig:
    """Runtime configuration for sampling, scenarios and exports."""

    sample_interval_seconds: float = DEFAULT_SAMPLE_INTERVAL
    max_history: int | None = None
    default_scenario_duration: float = 10.0
    optimization_draw_call_cutoff: int = DEFAULT_DRAW_CALL_CUTOFF
    asset_budget_limit: int = DEFAULT_BUDGET_LIMIT
    thresholds: KPIThresholds = field(default_factory=KPIThresholds)
    artifact_root: Path | None = None

    def __post_init__(self) -> None:
        if self.sample_interval_seconds <= 0:
            raise ValidationError(
                "sample_interval_seconds must be positive",
                context={"sample_interval_seconds": self.sample_interval_seconds},
            )
        if self.max_history is not None and self.max_history <= 0:
            raise ValidationError(
                "max_history must be positive or None",
                context={"max_history": self.max_history},
            )
        if self.default_scenario_duration <= 0:
            raise ValidationError(
                "default_scenario_duration must be positive",
                context={"default_scenario_duration": self.default_scenario_duration},
            )
        base_root = self.artifact_root or get_artifact_root()
        self.artifact_root = Path(base_root).expanduser().resolve()

    def exports_dir(self) -> Path:
        """Return the export directory and ensure it exists."""

        return ensure_exports_dir(self.artifact_root)
