from __future__ import annotations

from collections.abc import Iterable

from suidex.domain.entities.pool import DexStats, PoolRecord, PoolSummary


def _sum(values: Iterable[float | None]) -> float:
    return sum(value or 0.0 for value in values)


def compute_dex_stats(pools: list[PoolRecord]) -> dict[str, DexStats]:
    grouped: dict[str, list[PoolRecord]] = {}
    for pool in pools:
        grouped.setdefault(pool.dex, []).append(pool)
    return {
        dex: DexStats(
            pool_count=len(items),
            total_tvl=_sum(item.tvl for item in items),
            volume_24h=_sum(item.volume_24h for item in items),
            fees_24h=_sum(item.fees_24h for item in items),
        )
        for dex, items in grouped.items()
    }


def compute_summary(pools: list[PoolRecord]) -> PoolSummary:
    return PoolSummary(
        total_tvl=_sum(pool.tvl for pool in pools),
        total_volume_24h=_sum(pool.volume_24h for pool in pools),
        total_pools=len(pools),
    )
