"""Tests for the bundled metrics sources."""

from __future__ import annotations

import time

import pytest

from perf_profiler.telemetry.errors import SourceUnavailable
from perf_profiler.telemetry.history import HistoryStore
from perf_profiler.telemetry.models import BYTES_PER_MB, MetricsReading
from perf_profiler.telemetry.sampler import Sampler
from perf_profiler.telemetry.sources import FrameCounterSource, QueuedMetricsSource


def test_frame_counter_source_requires_a_frame() -> None:
    source = FrameCounterSource(memory_provider=lambda: 0)
    with pytest.raises(SourceUnavailable):
        source.read()


def test_frame_counter_source_reports_last_frame() -> None:
    source = FrameCounterSource(memory_provider=lambda: 64 * BYTES_PER_MB)
    source.record_frame(0.05, draw_calls=12, static_batches=3, dynamic_batches=4)
    source.record_frame(0.02, draw_calls=20, static_batches=5, dynamic_batches=6)

    reading = source.read()
    assert source.frames == 2
    assert reading.frame_delta_seconds == 0.02
    assert reading.memory_bytes == 64 * BYTES_PER_MB
    assert (reading.draw_calls, reading.static_batches, reading.dynamic_batches) == (20, 5, 6)


def test_frame_counter_source_feeds_sampler_with_guarded_fps() -> None:
    source = FrameCounterSource(memory_provider=lambda: 32 * BYTES_PER_MB)
    history = HistoryStore()
    sampler = Sampler(source, history)

    source.record_frame(0.0)
    paused = sampler.tick(0.0)
    source.record_frame(0.025)
    running = sampler.tick(0.5)

    assert paused.fps is None
    assert running.fps == pytest.approx(40.0)
    assert running.memory_mb == pytest.approx(32.0)


def test_frame_counter_source_uses_process_memory_by_default() -> None:
    source = FrameCounterSource()
    source.record_frame(0.016)
    assert source.read().memory_bytes > 0


def test_queued_source_returns_newest_reading(source_factory) -> None:
    queued = QueuedMetricsSource(source_factory([10.0, 20.0, 30.0]))
    with pytest.raises(SourceUnavailable):
        queued.read()
    queued.poll_once()
    queued.poll_once()
    assert queued.read().fps == 20.0
    # nothing new queued: the last reading is repeated
    assert queued.read().fps == 20.0


def test_queued_source_surfaces_failures_before_first_reading(source_factory) -> None:
    inner = source_factory([10.0])
    inner.fail_next = True
    queued = QueuedMetricsSource(inner)
    queued.poll_once()
    with pytest.raises(SourceUnavailable, match="counters offline"):
        queued.read()
    queued.poll_once()
    assert queued.read().fps == 10.0


def test_queued_source_background_thread_delivers_readings() -> None:
    class _Slow:
        def read(self) -> MetricsReading:
            time.sleep(0.005)
            return MetricsReading(fps=75.0)

    with QueuedMetricsSource(_Slow(), interval_seconds=0.01) as queued:
        assert queued.running
        deadline = time.monotonic() + 2.0
        reading = None
        while reading is None and time.monotonic() < deadline:
            try:
                reading = queued.read()
            except SourceUnavailable:
                time.sleep(0.01)
    assert reading is not None
    assert reading.fps == 75.0
    assert not queued.running
