from __future__ import annotations

from suidex.domain.services.normalization import normalize_pool
from suidex.domain.services.pool_stats import compute_dex_stats, compute_summary


def _pools():
    return [
        normalize_pool({"id": "a", "dex": "Cetus", "tvl": 100, "volume_24h": 10, "fees_24h": 1}),
        normalize_pool({"id": "b", "dex": "Cetus", "tvl": None, "volume_24h": None, "fees_24h": None}),
        normalize_pool({"id": "c", "dex": "Bluefin", "tvl": 50, "volume_24h": 5, "fees_24h": 0.5}),
    ]


def test_compute_dex_stats_treats_unknown_metrics_as_zero_for_sums():
    stats = compute_dex_stats(_pools())

    assert set(stats) == {"Cetus", "Bluefin"}
    assert stats["Cetus"].pool_count == 2
    assert stats["Cetus"].total_tvl == 100
    assert stats["Cetus"].volume_24h == 10
    assert stats["Cetus"].fees_24h == 1
    assert stats["Bluefin"].total_tvl == 50


def test_summary_agrees_with_dex_stats():
    pools = _pools()
    stats = compute_dex_stats(pools)
    summary = compute_summary(pools)

    assert summary.total_pools == len(pools) == sum(item.pool_count for item in stats.values())
    assert summary.total_tvl == sum(item.total_tvl for item in stats.values())
    assert summary.total_volume_24h == sum(item.volume_24h for item in stats.values())


def test_empty_pool_list_gives_zero_summary():
    summary = compute_summary([])
    assert compute_dex_stats([]) == {}
    assert (summary.total_tvl, summary.total_volume_24h, summary.total_pools) == (0, 0, 0)
