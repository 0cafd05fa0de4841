from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HistoricalSeriesResponse(_ContractModel):
    daily: list[dict[str, str | float]]
    totals: dict[str, float]
    days_included: int = Field(alias="daysIncluded")


class EfficiencyResponse(_ContractModel):
    name: str
    fees: float | None
    volume: float | None
    tvl: float | None
    fee_to_tvl: float | None = Field(alias="feeToTvl")
    fee_to_volume: float | None = Field(alias="feeToVolume")
    volume_to_tvl: float | None = Field(alias="volumeToTvl")
    annualized_fee_yield: float | None = Field(alias="annualizedFeeYield")


class DexHistoryResponse(_ContractModel):
    period: int
    volume: HistoricalSeriesResponse
    fees: HistoricalSeriesResponse
    efficiency: dict[str, EfficiencyResponse]
