"""Tests for record/replay cursor semantics."""

from __future__ import annotations

import pytest

from perf_profiler.telemetry.errors import EmptyBufferOperation
from perf_profiler.telemetry.models import Sample
from perf_profiler.telemetry.recording import Recorder


def _recorder_with(count: int) -> Recorder:
    recorder = Recorder()
    recorder.start_recording()
    for index in range(count):
        recorder.capture(Sample(time=float(index), fps=float(10 * (index + 1))))
    recorder.stop_recording()
    return recorder


def test_capture_ignored_when_not_recording() -> None:
    recorder = Recorder()
    assert recorder.capture(Sample(time=0.0)) is False
    assert len(recorder) == 0


def test_start_recording_clears_previous_buffer() -> None:
    recorder = _recorder_with(3)
    recorder.start_recording()
    assert len(recorder) == 0
    assert recorder.is_recording


def test_start_replay_on_empty_recording_raises() -> None:
    with pytest.raises(EmptyBufferOperation):
        Recorder().start_replay()


def test_replay_wraps_around_buffer_length() -> None:
    recorder = _recorder_with(3)
    recorder.start_replay()
    k = 4
    steps = [recorder.step_replay() for _ in range(len(recorder) + k)]
    assert [s.fps for s in steps] == [10.0, 20.0, 30.0, 10.0, 20.0, 30.0, 10.0]
    assert steps[len(recorder) : len(recorder) + k] == steps[:k]
    assert recorder.replay_index == len(recorder) + k


def test_stop_replay_preserves_cursor_and_resume_continues() -> None:
    recorder = _recorder_with(3)
    recorder.start_replay()
    recorder.step_replay()
    recorder.step_replay()
    recorder.stop_replay()

    assert recorder.step_replay() is None
    assert recorder.replay_index == 2

    recorder.resume_replay()
    assert recorder.step_replay().fps == 30.0
    assert recorder.step_replay().fps == 10.0


def test_start_replay_rewinds_cursor() -> None:
    recorder = _recorder_with(2)
    recorder.start_replay()
    recorder.step_replay()
    recorder.stop_replay()
    recorder.start_replay()
    assert recorder.replay_index == 0
    assert recorder.step_replay().fps == 10.0


def test_replay_over_emptied_buffer_returns_sentinel() -> None:
    recorder = _recorder_with(2)
    recorder.start_replay()
    recorder.start_recording()
    assert recorder.step_replay() is None
