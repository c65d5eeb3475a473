"""Cross-platform comparison datasets imported from CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from perf_profiler.telemetry.csv_codec import import_samples
from perf_profiler.telemetry.errors import ValidationError

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Iterator

    from perf_profiler.telemetry.models import Sample


class ComparisonSet:
    """Label to sample-sequence mapping populated only by CSV import."""

    def __init__(self) -> None:
        self._datasets: dict[str, list[Sample]] = {}

    def load_csv(self, path: str | Path, label: str | None = None) -> list[Sample]:
        """Import ``path`` under ``label`` (defaults to the file stem).

        Re-importing an existing label replaces only that dataset.
        """
        resolved_label = label if label is not None else Path(path).stem
        if not resolved_label:
            raise ValidationError("Dataset label must not be empty", context={"path": str(path)})
        samples = import_samples(path)
        self._datasets[resolved_label] = samples
        return list(samples)

    def labels(self) -> list[str]:
        return list(self._datasets)

    def get(self, label: str) -> list[Sample]:
        if label not in self._datasets:
            raise ValidationError(f"Unknown dataset {label!r}", context={"label": label})
        return list(self._datasets[label])

    def latest_fps(self, label: str) -> float | None:
        samples = self.get(label)
        return samples[-1].fps if samples else None

    def summary(self) -> dict[str, dict[str, float | int | None]]:
        """Per-label fps statistics; ``None`` where a dataset has no defined fps."""

        result: dict[str, dict[str, float | int | None]] = {}
        for label, samples in self._datasets.items():
            values = np.asarray([s.fps for s in samples if s.fps is not None], dtype=float)
            defined = values.size > 0
            result[label] = {
                "samples": len(samples),
                "latest_fps": samples[-1].fps if samples else None,
                "mean_fps": float(np.mean(values)) if defined else None,
                "min_fps": float(np.min(values)) if defined else None,
                "max_fps": float(np.max(values)) if defined else None,
            }
        return result

    def remove(self, label: str) -> None:
        self.get(label)
        del self._datasets[label]

    def clear(self) -> None:
        self._datasets.clear()

    def __contains__(self, label: object) -> bool:
        return label in self._datasets

    def __len__(self) -> int:
        return len(self._datasets)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._datasets))
