"""Metrics sources polled by the sampler.

A metrics source is any object with a ``read()`` method returning a
:class:`MetricsReading`. Two helpers are provided: :class:`FrameCounterSource`
for host loops that report their own frame counters, and
:class:`QueuedMetricsSource` that moves a blocking source onto a background
thread while keeping every state mutation on the thread that calls ``read``.
"""

from __future__ import annotations

import contextlib
import queue
import threading
import time
from typing import TYPE_CHECKING, Protocol

import psutil
from loguru import logger

from perf_profiler.common.errors import warn_soft_degrade
from perf_profiler.telemetry.errors import SourceUnavailable
from perf_profiler.telemetry.models import MetricsReading

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Callable

_PSUTIL_ERRORS: tuple[type[Exception], ...] = (psutil.Error, OSError)


class MetricsSource(Protocol):
    """Protocol for collaborators that supply one reading per call."""

    def read(self) -> MetricsReading:
        """Return the current counters; must not block indefinitely."""


class FrameCounterSource:
    """Metrics source fed by the host application's frame loop.

    The host calls :meth:`record_frame` once per rendered frame with the frame
    delta and render counters. ``read`` returns the most recent frame merged
    with the resident memory of the current process.
    """

    def __init__(self, memory_provider: Callable[[], int] | None = None) -> None:
        self._memory_provider = memory_provider
        self._process = None if memory_provider is not None else self._init_process_handle()
        self._last: MetricsReading | None = None
        self._frames = 0

    @property
    def frames(self) -> int:
        return self._frames

    def record_frame(
        self,
        delta_seconds: float,
        *,
        draw_calls: int = 0,
        static_batches: int = 0,
        dynamic_batches: int = 0,
    ) -> None:
        self._last = MetricsReading(
            frame_delta_seconds=delta_seconds,
            draw_calls=int(draw_calls),
            static_batches=int(static_batches),
            dynamic_batches=int(dynamic_batches),
        )
        self._frames += 1

    def read(self) -> MetricsReading:
        if self._last is None:
            raise SourceUnavailable(
                "No frame has been recorded yet",
                advice="Call record_frame() from the host loop before sampling.",
            )
        return MetricsReading(
            memory_bytes=self._memory_bytes(),
            draw_calls=self._last.draw_calls,
            static_batches=self._last.static_batches,
            dynamic_batches=self._last.dynamic_batches,
            frame_delta_seconds=self._last.frame_delta_seconds,
        )

    def _memory_bytes(self) -> int:
        if self._memory_provider is not None:
            return int(self._memory_provider())
        if self._process is None:
            return 0
        try:
            return int(self._process.memory_info().rss)
        except _PSUTIL_ERRORS as exc:  # pragma: no cover - psutil failure
            warn_soft_degrade("psutil", exc.__class__.__name__, "memory reported as 0")
            self._process = None
            return 0

    @staticmethod
    def _init_process_handle():
        """Initialize the psutil process handle.

        Returns:
            object | None: A ``psutil.Process`` handle, or ``None`` when initialization fails.
        """
        try:
            return psutil.Process()
        except _PSUTIL_ERRORS as exc:  # pragma: no cover - psutil failure
            logger.warning("Unable to initialize psutil.Process for metrics: {}", exc)
            return None


class QueuedMetricsSource:
    """Poll a slow source on a background thread and hand readings over a queue.

    The worker thread only ever touches the queue. ``read`` is called from the
    owning loop, drains everything queued so far and returns the newest
    reading; the last delivered reading is repeated while the worker has not
    produced a fresher one.
    """

    def __init__(self, inner: MetricsSource, *, interval_seconds: float = 0.25) -> None:
        self._inner = inner
        self._interval = max(interval_seconds, 0.01)
        self._queue: queue.SimpleQueue[MetricsReading | SourceUnavailable] = queue.SimpleQueue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._latest: MetricsReading | None = None

    def start(self) -> None:
        """Start the background polling loop."""

        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name="QueuedMetricsSource", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if not self._thread:
            return
        self._stop_event.set()
        self._thread.join(timeout=self._interval * 2)
        self._thread = None

    def close(self) -> None:
        """Alias for :meth:`stop` to support context-manager style usage."""

        self.stop()

    def __enter__(self) -> QueuedMetricsSource:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> None:
        """Read the inner source once and enqueue the result (or its failure)."""

        try:
            self._queue.put(self._inner.read())
        except SourceUnavailable as exc:
            self._queue.put(exc)
        except Exception as exc:  # noqa: BLE001 - collaborator failures become data
            self._queue.put(SourceUnavailable(f"Metrics source failed: {exc}"))

    def read(self) -> MetricsReading:
        error: SourceUnavailable | None = None
        with contextlib.suppress(queue.Empty):
            while True:
                item = self._queue.get_nowait()
                if isinstance(item, SourceUnavailable):
                    error = item
                else:
                    self._latest = item
                    error = None
        if error is not None:
            if self._latest is None:
                raise error
            logger.debug("Repeating last metrics reading after failure: {}", error.message)
        if self._latest is None:
            raise SourceUnavailable("No metrics reading has been queued yet")
        return self._latest

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            start = time.perf_counter()
            self.poll_once()
            elapsed = time.perf_counter() - start
            self._stop_event.wait(timeout=max(self._interval - elapsed, 0.0))
