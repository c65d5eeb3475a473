"""Timed scenario runs with automatic completion and summary statistics."""

from __future__ import annotations

import statistics
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from perf_profiler.telemetry.errors import (
    ScenarioAlreadyRunning,
    SourceUnavailable,
    TelemetryError,
    ValidationError,
)
from perf_profiler.telemetry.models import ScenarioRun, ScenarioStatus, ScenarioSummary

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Iterable

    from perf_profiler.telemetry.history import HistoryStore

_ACTIVE_STATES = (ScenarioStatus.LOADING, ScenarioStatus.RUNNING)


class SceneLoader(Protocol):
    """Protocol for the collaborator that opens a scenario target."""

    def load(self, target_id: str) -> bool:
        """Load ``target_id``; return False (or raise) on failure."""


class ScenarioRunner:
    """State machine for one scenario run at a time.

    ``Idle -> Loading -> Running -> Completed | Failed``. A new :meth:`start`
    from ``Completed`` or ``Failed`` discards the previous run; a start while
    ``Loading`` or ``Running`` is rejected with :class:`ScenarioAlreadyRunning`
    and leaves the active run untouched.
    """

    def __init__(self, history: HistoryStore, loader: SceneLoader | None = None) -> None:
        self._history = history
        self._loader = loader
        self._run = ScenarioRun()
        self._seen_version = history.version

    @property
    def status(self) -> ScenarioStatus:
        return self._run.status

    @property
    def run(self) -> ScenarioRun:
        return self._run

    @property
    def summary(self) -> ScenarioSummary | None:
        return self._run.summary

    @property
    def is_active(self) -> bool:
        return self._run.status in _ACTIVE_STATES

    def start(self, target_id: str | None, duration_seconds: float, now: float) -> ScenarioRun:
        """Load ``target_id`` and begin collecting samples.

        Raises:
            ScenarioAlreadyRunning: A run is loading or running.
            ValidationError: Missing target or non-positive duration; state becomes ``Failed``.
            SourceUnavailable: The scene loader failed; state becomes ``Failed``.
        """
        if self.is_active:
            raise ScenarioAlreadyRunning(
                "A scenario run is already in progress",
                context={"target_id": self._run.target_id, "status": self._run.status.value},
                advice="Wait for the current run to complete before starting another.",
            )
        if not target_id:
            self._fail(ValidationError("Scenario target is missing", advice="Select a scene."))
        if duration_seconds is None or not duration_seconds > 0:
            self._fail(
                ValidationError(
                    "Scenario duration must be positive",
                    context={"duration_seconds": duration_seconds},
                )
            )

        self._run = ScenarioRun(
            target_id=target_id,
            duration_seconds=float(duration_seconds),
            status=ScenarioStatus.LOADING,
        )
        self._load(target_id)
        self._run.collected_samples.clear()
        self._run.start_time = float(now)
        self._run.status = ScenarioStatus.RUNNING
        self._seen_version = self._history.version
        logger.info("Scenario {} started for {:.1f}s", target_id, duration_seconds)
        return self._run

    def tick(self, now: float) -> ScenarioStatus:
        """Collect new history samples and complete the run once the duration elapsed."""

        run = self._run
        if run.status is not ScenarioStatus.RUNNING:
            return run.status
        run.collected_samples.extend(self._history.since(self._seen_version))
        self._seen_version = self._history.version
        if run.elapsed(now) >= run.duration_seconds:
            run.summary = summarize(
                run.target_id or "", run.duration_seconds, run.collected_samples
            )
            run.status = ScenarioStatus.COMPLETED
            logger.info("Scenario complete\n{}", run.summary.describe())
        return run.status

    def reset(self) -> None:
        """Return to ``Idle``; rejected while a run is active."""

        if self.is_active:
            raise ScenarioAlreadyRunning(
                "Cannot reset while a scenario run is in progress",
                context={"target_id": self._run.target_id},
            )
        self._run = ScenarioRun()
        self._seen_version = self._history.version

    def abandon(self) -> None:
        """Drop any run, active or not, and return to ``Idle``."""

        if self.is_active:
            logger.info("Abandoning scenario run for {}", self._run.target_id)
        self._run = ScenarioRun()
        self._seen_version = self._history.version

    def _load(self, target_id: str) -> None:
        if self._loader is None:
            return
        try:
            loaded = self._loader.load(target_id)
        except TelemetryError as exc:
            self._fail(exc, target_id)
        except Exception as exc:  # noqa: BLE001 - loader failures become data
            self._fail(SourceUnavailable(f"Scene loader failed: {exc}"), target_id)
        else:
            if loaded is False:
                self._fail(
                    SourceUnavailable(
                        f"Scene loader could not open {target_id!r}",
                        context={"target_id": target_id},
                    ),
                    target_id,
                )

    def _fail(self, error: TelemetryError, target_id: str | None = None) -> None:
        self._run = ScenarioRun(
            target_id=target_id,
            status=ScenarioStatus.FAILED,
            error=error.to_dict(),
        )
        logger.warning("Scenario start failed: {}", error.message)
        raise error


def summarize(target_id: str, duration_seconds: float, samples: Iterable) -> ScenarioSummary:
    """Build the completion summary; averages are ``None`` for empty inputs."""

    samples = list(samples)
    fps_values = [sample.fps for sample in samples]
    memory_values = [sample.memory_mb for sample in samples]
    return ScenarioSummary(
        target_id=target_id,
        duration_seconds=duration_seconds,
        sample_count=len(samples),
        avg_fps=_avg(fps_values),
        avg_memory_mb=_avg(memory_values),
        min_fps=_min(fps_values),
        max_memory_mb=_max(memory_values),
    )


def _avg(values: Iterable[float | None]) -> float | None:
    """Average of non-None values or None when empty.

    Args:
        values: Iterable containing optional floats.

    Returns:
        float | None: Mean of values or None.
    """
    filtered = [value for value in values if value is not None]
    if not filtered:
        return None
    return float(statistics.fmean(filtered))


def _min(values: Iterable[float | None]) -> float | None:
    filtered = [value for value in values if value is not None]
    return float(min(filtered)) if filtered else None


def _max(values: Iterable[float | None]) -> float | None:
    filtered = [value for value in values if value is not None]
    return float(max(filtered)) if filtered else None
