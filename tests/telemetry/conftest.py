"""Fixtures providing stand-ins for the collaborators used across telemetry tests."""

from __future__ import annotations

import pytest

from perf_profiler.telemetry.errors import SourceUnavailable
from perf_profiler.telemetry.models import BYTES_PER_MB, MetricsReading


class ScriptedSource:
    """Return scripted fps values in order, repeating the last one when exhausted."""

    def __init__(self, fps_values=(60.0,), *, memory_mb: float = 100.0, draw_calls: int = 10):
        self.fps_values = list(fps_values)
        self.memory_mb = memory_mb
        self.draw_calls = draw_calls
        self.reads = 0
        self.fail_next = False

    def read(self) -> MetricsReading:
        if self.fail_next:
            self.fail_next = False
            raise SourceUnavailable("counters offline")
        fps = self.fps_values[min(self.reads, len(self.fps_values) - 1)]
        self.reads += 1
        return MetricsReading(
            fps=fps,
            memory_bytes=int(self.memory_mb * BYTES_PER_MB),
            draw_calls=self.draw_calls,
            static_batches=2,
            dynamic_batches=3,
        )


class RecordingLoader:
    """Scene loader that records requested targets and can be told to fail."""

    def __init__(self, result: bool = True, exc: Exception | None = None) -> None:
        self.result = result
        self.exc = exc
        self.loaded: list[str] = []

    def load(self, target_id: str) -> bool:
        self.loaded.append(target_id)
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture()
def source_factory():
    """Return factory producing scripted metrics sources."""

    def _factory(fps_values=(60.0,), **overrides) -> ScriptedSource:
        return ScriptedSource(fps_values, **overrides)

    return _factory


@pytest.fixture()
def loader_factory():
    """Return factory producing recording scene loaders."""

    def _factory(**overrides) -> RecordingLoader:
        return RecordingLoader(**overrides)

    return _factory
