"""Record/replay buffer for user-toggled sample captures."""

from __future__ import annotations

from loguru import logger

from perf_profiler.telemetry.errors import EmptyBufferOperation
from perf_profiler.telemetry.models import Sample


class Recorder:
    """Capture a sub-sequence of samples and replay it cyclically.

    The recording lives independently of the session history: starting a new
    recording clears only this buffer. Replay walks the buffer with a cursor
    that wraps at the end and never stops on its own. ``stop_replay`` keeps the
    cursor, so ``resume_replay`` continues where playback paused while
    ``start_replay`` rewinds to the first sample.
    """

    def __init__(self) -> None:
        self._buffer: list[Sample] = []
        self._is_recording = False
        self._is_replaying = False
        self._replay_index = 0

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    @property
    def is_replaying(self) -> bool:
        return self._is_replaying

    @property
    def replay_index(self) -> int:
        return self._replay_index

    def samples(self) -> tuple[Sample, ...]:
        return tuple(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def start_recording(self) -> None:
        self._buffer.clear()
        self._is_recording = True
        logger.debug("Recording started")

    def stop_recording(self) -> None:
        self._is_recording = False
        logger.debug("Recording stopped with {} samples", len(self._buffer))

    def capture(self, sample: Sample) -> bool:
        """Append ``sample`` when recording is active.

        Returns:
            bool: True when the sample was captured.
        """
        if not self._is_recording:
            return False
        self._buffer.append(sample)
        return True

    def start_replay(self) -> None:
        """Begin replay from the first recorded sample.

        Raises:
            EmptyBufferOperation: If nothing has been recorded yet.
        """
        self._ensure_not_empty("start replay")
        self._is_replaying = True
        self._replay_index = 0
        logger.info("Replay started over {} recorded samples", len(self._buffer))

    def resume_replay(self) -> None:
        """Continue a paused replay from the preserved cursor."""

        self._ensure_not_empty("resume replay")
        self._is_replaying = True

    def stop_replay(self) -> None:
        self._is_replaying = False

    def step_replay(self) -> Sample | None:
        """Return the sample under the cursor and advance it (cyclic).

        Returns:
            Sample | None: The replayed sample, or ``None`` when replay is not
            active or the buffer has been emptied by a new recording.
        """
        if not self._is_replaying or not self._buffer:
            return None
        sample = self._buffer[self._replay_index % len(self._buffer)]
        self._replay_index += 1
        return sample

    def clear(self) -> None:
        self._buffer.clear()
        self._is_recording = False
        self._is_replaying = False
        self._replay_index = 0

    def _ensure_not_empty(self, action: str) -> None:
        if not self._buffer:
            raise EmptyBufferOperation(
                f"Cannot {action}: the recording is empty",
                advice="Start and stop a recording while sampling before replaying.",
            )
