from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Literal


class Dex(str, Enum):
    CETUS = "Cetus"
    BLUEFIN = "Bluefin"
    FULL_SAIL = "Full Sail"


FetchOutcome = Literal["success", "failed"]
FETCH_SUCCESS: FetchOutcome = "success"
FETCH_FAILED: FetchOutcome = "failed"


@dataclass(frozen=True)
class PoolRecord:
    id: str
    name: str
    dex: str
    tvl: float | None
    volume_24h: float | None
    volume_7d: float | None
    volume_30d: float | None
    fees_24h: float | None
    fees_7d: float | None
    fees_30d: float | None
    fee_rate: float
    apr: float | None
    apy_base: float | None
    apy_reward: float | None
    stablecoin: bool


@dataclass(frozen=True)
class DexStats:
    pool_count: int
    total_tvl: float
    volume_24h: float
    fees_24h: float


@dataclass(frozen=True)
class PoolSummary:
    total_tvl: float
    total_volume_24h: float
    total_pools: int


@dataclass(frozen=True)
class AggregationResult:
    pools: list[PoolRecord]
    dex_stats: dict[str, DexStats]
    summary: PoolSummary
    last_updated: datetime
    mode: str
    fetch_status: dict[str, FetchOutcome] = field(default_factory=dict)

    def with_mode(self, mode: str) -> "AggregationResult":
        if mode == self.mode:
            return self
        return replace(self, mode=mode)
