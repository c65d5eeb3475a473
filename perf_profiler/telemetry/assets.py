"""Per-asset draw-call and memory rollups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from perf_profiler.telemetry.models import AssetStat, AssetUsage

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from collections.abc import Iterable

UsageLike = AssetUsage | tuple[str | None, int]

DEFAULT_BUDGET_LIMIT = 10


class AssetAggregator:
    """Aggregate renderable-asset usages into :class:`AssetStat` rollups.

    Each :meth:`analyze` pass rebuilds the whole map, so repeated calls with the
    same usages produce the same result. Stats keep first-seen order, which is
    also the tie-break order of :meth:`top_n`.
    """

    def __init__(self, *, budget_limit: int = DEFAULT_BUDGET_LIMIT) -> None:
        self._stats: dict[str, AssetStat] = {}
        self._budget_limit = budget_limit
        self._skipped = 0

    @property
    def skipped_usages(self) -> int:
        """Usages without an asset reference ignored by the last pass."""

        return self._skipped

    def analyze(self, usages: Iterable[UsageLike]) -> dict[str, AssetStat]:
        """Rebuild the stat map from an enumeration of asset usages.

        Args:
            usages: One entry per renderable instance, either :class:`AssetUsage`
                or an ``(asset_id, memory_bytes)`` pair. Duplicate ids are expected.

        Returns:
            dict[str, AssetStat]: The rebuilt map keyed by asset name.
        """
        stats: dict[str, AssetStat] = {}
        skipped = 0
        for usage in usages:
            asset_id, memory_bytes = _unpack(usage)
            if asset_id is None:
                skipped += 1
                continue
            stat = stats.get(asset_id)
            if stat is None:
                stat = stats[asset_id] = AssetStat(asset_id)
            stat.draw_calls += 1
            stat.memory_bytes += int(memory_bytes)
        self._stats = stats
        self._skipped = skipped
        logger.info(
            "Analyzed {} assets ({} usages skipped without an asset reference)",
            len(stats),
            skipped,
        )
        return dict(stats)

    def stats(self) -> list[AssetStat]:
        """Return the stats of the last pass in first-seen order."""

        return list(self._stats.values())

    def get(self, name: str) -> AssetStat | None:
        return self._stats.get(name)

    def top_n(self, n: int) -> list[AssetStat]:
        """Return the ``n`` assets with the most draw calls (stable for ties)."""

        if n <= 0:
            return []
        ranked = sorted(self._stats.values(), key=lambda stat: stat.draw_calls, reverse=True)
        return ranked[:n]

    def budget(self) -> list[AssetStat]:
        return self.top_n(self._budget_limit)

    def clear(self) -> None:
        self._stats = {}
        self._skipped = 0

    def __len__(self) -> int:
        return len(self._stats)


def _unpack(usage: UsageLike) -> tuple[str | None, int]:
    if isinstance(usage, AssetUsage):
        return usage.asset_id, usage.memory_bytes
    asset_id, memory_bytes = usage
    return asset_id, memory_bytes
