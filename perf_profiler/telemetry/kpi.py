"""KPI thresholds and the stateless threshold evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from perf_profiler.telemetry.errors import ValidationError
from perf_profiler.telemetry.models import KPIWarning

if TYPE_CHECKING:  # pragma: no cover - hints only
    from perf_profiler.telemetry.models import Sample

DEFAULT_CUSTOM_KPI_NAME = "NewKPI"


@dataclass(slots=True)
class KPIThresholds:
    """Built-in limits plus operator-tracked custom KPIs.

    Setting a built-in limit to ``None`` disables its rule. Custom KPIs are
    free-standing named values; the evaluator never compares them to samples.
    """

    fps: float | None = 30.0
    memory_bytes: int | None = 500 * 1024 * 1024
    draw_calls: int | None = 100
    static_batches: int | None = 50
    dynamic_batches: int | None = 100
    custom: dict[str, float] = field(default_factory=dict)

    def add_custom(self, name: str = DEFAULT_CUSTOM_KPI_NAME, value: float = 0.0) -> None:
        """Add a custom KPI; names are unique."""

        if not name:
            raise ValidationError("Custom KPI name must not be empty")
        if name in self.custom:
            raise ValidationError(
                f"Custom KPI {name!r} already exists",
                context={"name": name},
                advice="Rename the existing KPI or pick a different name.",
            )
        self.custom[name] = float(value)

    def set_custom(self, name: str, value: float) -> None:
        self._require_custom(name)
        self.custom[name] = float(value)

    def remove_custom(self, name: str) -> float:
        self._require_custom(name)
        return self.custom.pop(name)

    def as_dict(self) -> dict[str, float | None]:
        """Flat metric-name to limit mapping, custom KPIs prefixed with ``custom:``."""

        payload: dict[str, float | None] = {
            "fps": self.fps,
            "memory": self.memory_bytes,
            "drawCalls": self.draw_calls,
            "staticBatches": self.static_batches,
            "dynamicBatches": self.dynamic_batches,
        }
        payload.update({f"custom:{name}": value for name, value in self.custom.items()})
        return payload

    def _require_custom(self, name: str) -> None:
        if name not in self.custom:
            raise ValidationError(f"Unknown custom KPI {name!r}", context={"name": name})


def evaluate(sample: Sample | None, thresholds: KPIThresholds) -> list[KPIWarning]:
    """Return every threshold breach for ``sample``.

    Rules fire independently in a fixed order: fps, draw calls, memory, static
    batches, dynamic batches. An undefined fps reading never triggers the fps
    rule, and no sample at all yields no warnings.
    """
    if sample is None:
        return []
    warnings: list[KPIWarning] = []
    if thresholds.fps is not None and sample.fps is not None and sample.fps < thresholds.fps:
        warnings.append(
            KPIWarning(
                metric="fps",
                observed=sample.fps,
                threshold=thresholds.fps,
                message=f"FPS dropped below {thresholds.fps:g}. Optimize assets or code.",
            )
        )
    if thresholds.draw_calls is not None and sample.draw_calls > thresholds.draw_calls:
        warnings.append(
            KPIWarning(
                metric="drawCalls",
                observed=sample.draw_calls,
                threshold=thresholds.draw_calls,
                message=f"Draw Calls exceed {thresholds.draw_calls}. Consider batching.",
            )
        )
    if thresholds.memory_bytes is not None and sample.memory_bytes > thresholds.memory_bytes:
        warnings.append(
            KPIWarning(
                metric="memory",
                observed=sample.memory_bytes,
                threshold=thresholds.memory_bytes,
                message=(
                    f"Memory {sample.memory_mb:.1f} MB exceeds "
                    f"{thresholds.memory_bytes / (1024 * 1024):.1f} MB."
                ),
            )
        )
    if thresholds.static_batches is not None and sample.static_batches > thresholds.static_batches:
        warnings.append(
            KPIWarning(
                metric="staticBatches",
                observed=sample.static_batches,
                threshold=thresholds.static_batches,
                message=f"Static batches exceed {thresholds.static_batches}.",
            )
        )
    if (
        thresholds.dynamic_batches is not None
        and sample.dynamic_batches > thresholds.dynamic_batches
    ):
        warnings.append(
            KPIWarning(
                metric="dynamicBatches",
                observed=sample.dynamic_batches,
                threshold=thresholds.dynamic_batches,
                message=f"Dynamic batches exceed {thresholds.dynamic_batches}.",
            )
        )
    return warnings


__all__ = ["DEFAULT_CUSTOM_KPI_NAME", "KPIThresholds", "evaluate"]
