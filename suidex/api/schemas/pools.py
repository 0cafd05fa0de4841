from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PoolResponseItem(_ContractModel):
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
    fee_rate: float = Field(alias="feeRate")
    apr: float | None
    apy_base: float | None = Field(alias="apyBase")
    apy_reward: float | None = Field(alias="apyReward")
    stablecoin: bool


class DexStatsResponse(_ContractModel):
    pool_count: int = Field(alias="poolCount")
    total_tvl: float = Field(alias="totalTVL")
    volume_24h: float = Field(alias="volume24h")
    fees_24h: float = Field(alias="fees24h")


class PoolSummaryResponse(_ContractModel):
    total_tvl: float = Field(alias="totalTVL")
    total_volume_24h: float = Field(alias="totalVolume24h")
    total_pools: int = Field(alias="totalPools")


class PoolDataResponse(_ContractModel):
    last_updated: datetime = Field(alias="lastUpdated")
    mode: str
    summary: PoolSummaryResponse
    dex_stats: dict[str, DexStatsResponse] = Field(alias="dexStats")
    fetch_status: dict[str, str] = Field(alias="fetchStatus")
    pools: list[PoolResponseItem]


class DataSourceResponse(_ContractModel):
    current_mode: str = Field(alias="currentMode")
    available_modes: list[str] = Field(alias="availableModes")


class ClearCacheResponse(_ContractModel):
    cleared: list[str]
