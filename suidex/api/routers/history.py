from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from suidex.api.deps import get_dex_history_use_case
from suidex.api.schemas.history import DexHistoryResponse, EfficiencyResponse, HistoricalSeriesResponse
from suidex.application.dto.dex_history import GetDexHistoryInput
from suidex.application.use_cases.get_dex_history import GetDexHistoryUseCase
from suidex.domain.entities.history import HistoricalSeries
from suidex.domain.exceptions import HistoryPeriodError

router = APIRouter()


def _series_response(series: HistoricalSeries) -> HistoricalSeriesResponse:
    return HistoricalSeriesResponse(
        daily=[{"date": day.date, **day.values} for day in series.daily],
        totals=dict(series.totals),
        days_included=series.days_included,
    )


@router.get("/v1/history", response_model=DexHistoryResponse)
async def get_dex_history(
    days: int = 30,
    use_case: GetDexHistoryUseCase = Depends(get_dex_history_use_case),
):
    try:
        result = await use_case.execute(GetDexHistoryInput(days=days))
    except HistoryPeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return DexHistoryResponse(
        period=result.period,
        volume=_series_response(result.volume),
        fees=_series_response(result.fees),
        efficiency={
            dex: EfficiencyResponse(
                name=metrics.dex,
                fees=metrics.fees,
                volume=metrics.volume,
                tvl=metrics.tvl,
                fee_to_tvl=metrics.fee_to_tvl,
                fee_to_volume=metrics.fee_to_volume,
                volume_to_tvl=metrics.volume_to_tvl,
                annualized_fee_yield=metrics.annualized_fee_yield,
            )
            for dex, metrics in result.efficiency.items()
        },
    )
