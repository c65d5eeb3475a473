"""Fixed-cadence sampler driven by the host application's update loop."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from perf_profiler.telemetry.errors import SourceUnavailable, ValidationError
from perf_profiler.telemetry.models import (
    BYTES_PER_MB,
    MetricsReading,
    Sample,
    fps_from_frame_delta,
    sanitize_fps,
)

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from perf_profiler.telemetry.history import HistoryStore
    from perf_profiler.telemetry.recording import Recorder
    from perf_profiler.telemetry.sources import MetricsSource

DEFAULT_SAMPLE_INTERVAL = 0.5


class SampleConsumer(Protocol):
    """Protocol for callbacks that observe every new sample."""

    def __call__(self, sample: Sample) -> None:
        """Handle a freshly captured sample."""


class Sampler:
    """Poll a metrics source at most once per ``interval_seconds``.

    The sampler is the only writer of the history store and the recording. It
    does not own a thread: the host calls :meth:`tick` from its update loop
    with the current time in seconds. The first tick always samples.
    """

    def __init__(
        self,
        source: MetricsSource,
        history: HistoryStore,
        recorder: Recorder | None = None,
        *,
        interval_seconds: float = DEFAULT_SAMPLE_INTERVAL,
    ) -> None:
        if interval_seconds <= 0:
            raise ValidationError(
                "Sample interval must be positive",
                context={"interval_seconds": interval_seconds},
            )
        self._source = source
        self._history = history
        self._recorder = recorder
        self._interval = float(interval_seconds)
        self._last_sample_time: float | None = None
        self._samples_taken = 0
        self._undefined_fps = 0
        self._last_error: SourceUnavailable | None = None
        self._callbacks: list[SampleConsumer] = []

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def last_sample_time(self) -> float | None:
        return self._last_sample_time

    @property
    def samples_taken(self) -> int:
        """Return the number of samples captured so far (the change token)."""

        return self._samples_taken

    @property
    def undefined_fps_count(self) -> int:
        return self._undefined_fps

    @property
    def last_error(self) -> SourceUnavailable | None:
        """Failure of the most recent due tick, cleared by the next successful sample."""

        return self._last_error

    def add_consumer(self, consumer: SampleConsumer) -> None:
        """Register a callback that receives every captured sample."""

        self._callbacks.append(consumer)

    def is_due(self, now: float) -> bool:
        if self._last_sample_time is None:
            return True
        return now - self._last_sample_time >= self._interval

    def tick(self, now: float) -> Sample | None:
        """Capture one sample when the interval has elapsed.

        Returns:
            Sample | None: The new sample, or ``None`` when the tick was not due
            or the metrics source was unavailable (see :attr:`last_error`).
        """
        if not self.is_due(now):
            return None
        try:
            reading = self._source.read()
        except SourceUnavailable as exc:
            self._record_failure(exc)
            return None
        except Exception as exc:  # noqa: BLE001 - collaborator failures become data
            self._record_failure(SourceUnavailable(f"Metrics source failed: {exc}"))
            return None

        sample = self._build_sample(now, reading)
        self._history.append(sample)
        if self._recorder is not None:
            self._recorder.capture(sample)
        self._last_sample_time = now
        self._samples_taken += 1
        self._last_error = None
        for consumer in list(self._callbacks):
            with contextlib.suppress(Exception):
                consumer(sample)
        return sample

    def reset(self) -> None:
        self._last_sample_time = None
        self._last_error = None

    def _build_sample(self, now: float, reading: MetricsReading) -> Sample:
        if reading.frame_delta_seconds is not None:
            fps = fps_from_frame_delta(reading.frame_delta_seconds)
        else:
            fps = sanitize_fps(reading.fps)
        if fps is None:
            self._undefined_fps += 1
            logger.debug("Undefined fps at t={:.2f}; stored as sentinel", now)
        return Sample(
            time=float(now),
            fps=fps,
            memory_mb=max(float(reading.memory_bytes), 0.0) / BYTES_PER_MB,
            draw_calls=max(int(reading.draw_calls), 0),
            static_batches=max(int(reading.static_batches), 0),
            dynamic_batches=max(int(reading.dynamic_batches), 0),
        )

    def _record_failure(self, error: SourceUnavailable) -> None:
        if self._last_error is None:
            logger.warning("Metrics source unavailable: {}", error.message)
        self._last_error = error
