from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DailyBreakdown:
    date: str
    values: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class HistoricalSeries:
    daily: list[DailyBreakdown] = field(default_factory=list)
    totals: dict[str, float] = field(default_factory=dict)
    days_included: int = 0


@dataclass(frozen=True)
class EfficiencyMetrics:
    dex: str
    fees: float | None
    volume: float | None
    tvl: float | None
    fee_to_tvl: float | None
    fee_to_volume: float | None
    volume_to_tvl: float | None
    annualized_fee_yield: float | None


@dataclass(frozen=True)
class DexHistory:
    period: int
    volume: HistoricalSeries
    fees: HistoricalSeries
    efficiency: dict[str, EfficiencyMetrics]
