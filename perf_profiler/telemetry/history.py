"""In-memory sample history for a capture session."""

from __future__ import annotations

import itertools
from collections import deque
from typing import TYPE_CHECKING

from perf_profiler.telemetry.errors import ValidationError

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Iterator

    from perf_profiler.telemetry.models import Sample


class HistoryStore:
    """Ordered sample buffer, unbounded unless ``max_samples`` is configured.

    Samples must arrive in capture order: appending a sample older than the
    current latest raises :class:`ValidationError`. ``version`` counts every
    append since construction (it survives ring eviction and ``clear``) and
    doubles as the change token observers poll to detect new data.

    With ``max_samples`` set the store is a ring: the oldest samples are
    evicted, while a recording started earlier keeps its own copies, so a
    recording may then hold samples this store no longer retains.
    """

    def __init__(self, max_samples: int | None = None) -> None:
        if max_samples is not None and max_samples <= 0:
            raise ValidationError(
                "max_samples must be positive when set",
                context={"max_samples": max_samples},
            )
        self._samples: deque[Sample] = deque(maxlen=max_samples)
        self._version = 0

    @property
    def max_samples(self) -> int | None:
        return self._samples.maxlen

    @property
    def version(self) -> int:
        return self._version

    def append(self, sample: Sample) -> None:
        """Append ``sample`` after the current latest entry."""

        if self._samples and sample.time < self._samples[-1].time:
            raise ValidationError(
                "Samples must be appended in non-decreasing time order",
                context={"latest_time": self._samples[-1].time, "sample_time": sample.time},
            )
        self._samples.append(sample)
        self._version += 1

    def latest(self) -> Sample | None:
        """Return the most recent sample, or ``None`` when the store is empty."""

        if not self._samples:
            return None
        return self._samples[-1]

    def all(self) -> tuple[Sample, ...]:
        """Return a read-only snapshot of every retained sample in time order."""

        return tuple(self._samples)

    def since(self, version: int) -> list[Sample]:
        """Return samples appended after the given ``version`` that are still retained."""

        missing = self._version - version
        if missing <= 0:
            return []
        missing = min(missing, len(self._samples))
        return list(itertools.islice(reversed(self._samples), missing))[::-1]

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(tuple(self._samples))

    def __bool__(self) -> bool:
        return bool(self._samples)
