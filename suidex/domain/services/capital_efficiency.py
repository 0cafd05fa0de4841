"""Daily DEX breakdowns and the capital efficiency ratios derived from them.

Ratios are ``None`` whenever an input is unknown or the denominator is not
positive, so a DEX missing from a series never reads as zero efficiency.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from suidex.domain.entities.history import DailyBreakdown, EfficiencyMetrics, HistoricalSeries

DAYS_PER_YEAR = 365


def summarize_breakdown(
    entries: Sequence[tuple[int, dict[str, float]]],
    days: int,
) -> HistoricalSeries:
    """Keep the trailing ``days`` entries and total them per DEX."""
    recent = list(entries)[-days:] if days > 0 else []
    daily: list[DailyBreakdown] = []
    totals: dict[str, float] = {}
    for timestamp, values in recent:
        date = datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()
        daily.append(DailyBreakdown(date=date, values=dict(values)))
        for dex, value in values.items():
            totals[dex] = totals.get(dex, 0.0) + value
    return HistoricalSeries(daily=daily, totals=totals, days_included=len(recent))


def _ratio(numerator: float | None, denominator: float | None) -> float | None:
    if numerator is None or denominator is None or denominator <= 0:
        return None
    return numerator / denominator


def compute_efficiency(
    dex: str,
    *,
    fees: float | None,
    volume: float | None,
    tvl: float | None,
    days: int,
) -> EfficiencyMetrics:
    fee_to_tvl = _ratio(fees, tvl)
    fee_to_volume = _ratio(fees, volume)
    return EfficiencyMetrics(
        dex=dex,
        fees=fees,
        volume=volume,
        tvl=tvl,
        fee_to_tvl=None if fee_to_tvl is None else fee_to_tvl * 100,
        fee_to_volume=None if fee_to_volume is None else fee_to_volume * 100,
        volume_to_tvl=_ratio(volume, tvl),
        annualized_fee_yield=None if fee_to_tvl is None else fee_to_tvl / days * DAYS_PER_YEAR * 100,
    )
