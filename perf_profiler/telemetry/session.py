"""Single-owner profiler session tying the telemetry components together.

The dashboard (or any host loop) drives a :class:`ProfilerSession` by calling
:meth:`ProfilerSession.tick` from its update loop and issuing commands. All
mutation of history, recording and scenario state happens on the thread that
calls into the session. Commands report failures as :class:`CommandResult`
values instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from perf_profiler.telemetry import kpi
from perf_profiler.telemetry.assets import AssetAggregator
from perf_profiler.telemetry.comparison import ComparisonSet
from perf_profiler.telemetry.config import ProfilerConfig
from perf_profiler.telemetry.csv_codec import export_samples, write_kpi_report
from perf_profiler.telemetry.errors import TelemetryError, ValidationError
from perf_profiler.telemetry.history import HistoryStore
from perf_profiler.telemetry.recommendations import OptimizationAdvisor
from perf_profiler.telemetry.recording import Recorder
from perf_profiler.telemetry.sampler import Sampler
from perf_profiler.telemetry.scenario import ScenarioRunner
from perf_profiler.telemetry.visualization import render_fps_heatmap

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Callable, Iterable

    from perf_profiler.telemetry.assets import UsageLike
    from perf_profiler.telemetry.kpi import KPIThresholds
    from perf_profiler.telemetry.models import (
        AssetStat,
        KPIWarning,
        Sample,
        ScenarioStatus,
        ScenarioSummary,
    )
    from perf_profiler.telemetry.scenario import SceneLoader
    from perf_profiler.telemetry.sources import MetricsSource


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a dashboard command."""

    ok: bool
    value: Any = None
    error: dict[str, object] | None = None

    @classmethod
    def success(cls, value: Any = None) -> CommandResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: TelemetryError) -> CommandResult:
        return cls(ok=False, error=error.to_dict())


@dataclass(frozen=True, slots=True)
class TickReport:
    """What changed during one session tick."""

    sampled: bool
    sample: Sample | None
    scenario_status: ScenarioStatus
    warnings: tuple[KPIWarning, ...] = field(default_factory=tuple)


class ProfilerSession:
    """Owns the sampler, buffers, scenario runner and analysis components."""

    def __init__(
        self,
        metrics_source: MetricsSource,
        config: ProfilerConfig | None = None,
        *,
        scene_loader: SceneLoader | None = None,
    ) -> None:
        self.config = config or ProfilerConfig()
        self._source = metrics_source
        self.history = HistoryStore(self.config.max_history)
        self.recorder = Recorder()
        self.sampler = Sampler(
            metrics_source,
            self.history,
            self.recorder,
            interval_seconds=self.config.sample_interval_seconds,
        )
        self.scenario = ScenarioRunner(self.history, scene_loader)
        self.assets = AssetAggregator(budget_limit=self.config.asset_budget_limit)
        self.advisor = OptimizationAdvisor(
            draw_call_cutoff=self.config.optimization_draw_call_cutoff
        )
        self.comparison = ComparisonSet()
        self._closed = False

    def __enter__(self) -> ProfilerSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- tick path -----------------------------------------------------------------

    def tick(self, now: float) -> TickReport:
        """Sample if due, advance the scenario and evaluate KPIs on new data.

        A closed session no longer samples; the report carries the idle status.
        """

        if self._closed:
            return TickReport(sampled=False, sample=None, scenario_status=self.scenario.status)
        sample = self.sampler.tick(now)
        status = self.scenario.tick(now)
        warnings = tuple(kpi.evaluate(sample, self.thresholds)) if sample is not None else ()
        return TickReport(
            sampled=sample is not None,
            sample=sample,
            scenario_status=status,
            warnings=warnings,
        )

    # -- read-only views -----------------------------------------------------------

    @property
    def thresholds(self) -> KPIThresholds:
        return self.config.thresholds

    @property
    def change_token(self) -> int:
        return self.history.version

    @property
    def scenario_status(self) -> ScenarioStatus:
        return self.scenario.status

    @property
    def scenario_summary(self) -> ScenarioSummary | None:
        return self.scenario.summary

    @property
    def recommendations(self) -> list[str]:
        return self.advisor.recommendations

    def latest(self) -> Sample | None:
        return self.history.latest()

    def history_samples(self) -> tuple[Sample, ...]:
        return self.history.all()

    def current_warnings(self) -> list[KPIWarning]:
        return kpi.evaluate(self.history.latest(), self.thresholds)

    def asset_budget(self) -> list[AssetStat]:
        return self.assets.budget()

    # -- commands ------------------------------------------------------------------

    def start_scenario(
        self, target_id: str | None, duration_seconds: float | None, now: float
    ) -> CommandResult:
        duration = (
            self.config.default_scenario_duration if duration_seconds is None else duration_seconds
        )
        return self._command(lambda: self.scenario.start(target_id, duration, now))

    def reset_scenario(self) -> CommandResult:
        return self._command(self.scenario.reset)

    def start_recording(self) -> CommandResult:
        return self._command(self.recorder.start_recording)

    def stop_recording(self) -> CommandResult:
        return self._command(self.recorder.stop_recording)

    def start_replay(self) -> CommandResult:
        return self._command(self.recorder.start_replay)

    def resume_replay(self) -> CommandResult:
        return self._command(self.recorder.resume_replay)

    def stop_replay(self) -> CommandResult:
        return self._command(self.recorder.stop_replay)

    def step_replay(self) -> CommandResult:
        return self._command(self.recorder.step_replay)

    def analyze_assets(self, usages: Iterable[UsageLike]) -> CommandResult:
        return self._command(lambda: self.assets.analyze(usages))

    def run_optimization_scan(self) -> CommandResult:
        return self._command(lambda: self.advisor.run(self.assets.stats()))

    def export_history_csv(self, path: str | Path | None = None) -> CommandResult:
        return self._command(
            lambda: export_samples(self.history.all(), self._export_path(path, "samples.csv"))
        )

    def export_recording_csv(self, path: str | Path | None = None) -> CommandResult:
        return self._command(
            lambda: export_samples(
                self.recorder.samples(), self._export_path(path, "recording.csv")
            )
        )

    def import_comparison_csv(self, path: str | Path, label: str | None = None) -> CommandResult:
        return self._command(lambda: self.comparison.load_csv(path, label))

    def export_kpi_report(self, path: str | Path | None = None) -> CommandResult:
        return self._command(
            lambda: write_kpi_report(
                self._export_path(path, "report.csv"), self.history.latest(), self.thresholds
            )
        )

    def render_heatmap(self, path: str | Path | None = None) -> CommandResult:
        def _render() -> Path:
            fps_threshold = self.thresholds.fps
            if fps_threshold is None:
                raise ValidationError("The fps threshold is disabled; the heatmap needs one")
            return render_fps_heatmap(
                self.history.all(), fps_threshold, self._export_path(path, "heatmap.png")
            )

        return self._command(_render)

    def close(self) -> None:
        """Tear down the capture session, dropping history, recording and any scenario run."""

        if self._closed:
            return
        stop = getattr(self._source, "stop", None)
        if callable(stop):
            stop()
        self.scenario.abandon()
        self.history.clear()
        self.recorder.clear()
        self.sampler.reset()
        self._closed = True
        logger.debug("Profiler session closed")

    # -- helpers -------------------------------------------------------------------

    def _export_path(self, path: str | Path | None, default_name: str) -> Path:
        if path is not None:
            return Path(path)
        return self.config.exports_dir() / default_name

    @staticmethod
    def _command(action: Callable[[], Any]) -> CommandResult:
        try:
            return CommandResult.success(action())
        except TelemetryError as exc:
            logger.debug("Command failed: {}", exc.to_dict())
            return CommandResult.failure(exc)
        except OSError as exc:
            logger.warning("Command failed with I/O error: {}", exc)
            return CommandResult.failure(TelemetryError(f"I/O error: {exc}"))
        except (UnicodeError, ValueError) as exc:
            logger.warning("Command failed on bad input: {}", exc)
            return CommandResult.failure(
                TelemetryError(f"Invalid input: {exc}", context={"exception": type(exc).__name__})
            )
