"""Rule-based optimization advice derived from asset rollups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:  # pragma: no cover - hints only
    from collections.abc import Iterable

    from perf_profiler.telemetry.models import AssetStat

DEFAULT_DRAW_CALL_CUTOFF = 50


class OptimizationAdvisor:
    """Scan asset stats and keep the latest list of recommendations."""

    def __init__(self, *, draw_call_cutoff: int = DEFAULT_DRAW_CALL_CUTOFF) -> None:
        self._cutoff = draw_call_cutoff
        self._recommendations: list[str] = []

    @property
    def draw_call_cutoff(self) -> int:
        return self._cutoff

    @property
    def recommendations(self) -> list[str]:
        return list(self._recommendations)

    def run(self, asset_stats: Iterable[AssetStat]) -> list[str]:
        """Replace the stored recommendations with a fresh :func:`scan`."""

        self._recommendations = scan(asset_stats, self._cutoff)
        logger.info("Optimization scan produced {} recommendations", len(self._recommendations))
        return list(self._recommendations)

    def clear(self) -> None:
        self._recommendations = []


def scan(
    asset_stats: Iterable[AssetStat], draw_call_cutoff: int = DEFAULT_DRAW_CALL_CUTOFF
) -> list[str]:
    """Return one recommendation per asset above the draw-call cutoff.

    Order follows the iteration order of ``asset_stats``; stats are not mutated.
    """
    return [
        f"Consider static batching for {stat.name}"
        for stat in asset_stats
        if stat.draw_calls > draw_call_cutoff
    ]
