from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from suidex.api.deps import get_fetch_pool_data_use_case
from suidex.api.schemas.pools import (
    ClearCacheResponse,
    DataSourceResponse,
    DexStatsResponse,
    PoolDataResponse,
    PoolResponseItem,
    PoolSummaryResponse,
)
from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.application.use_cases.fetch_pool_data import FetchPoolDataUseCase
from suidex.domain.exceptions import DataSourceModeError

router = APIRouter()


@router.get("/v1/pools", response_model=PoolDataResponse)
async def get_pools(
    mode: str | None = None,
    force_refresh: bool = Query(False, alias="forceRefresh"),
    use_case: FetchPoolDataUseCase = Depends(get_fetch_pool_data_use_case),
):
    result = await use_case.execute(FetchPoolDataInput(force_refresh=force_refresh, mode=mode))
    return PoolDataResponse(
        last_updated=result.last_updated,
        mode=result.mode,
        summary=PoolSummaryResponse(
            total_tvl=result.summary.total_tvl,
            total_volume_24h=result.summary.total_volume_24h,
            total_pools=result.summary.total_pools,
        ),
        dex_stats={
            dex: DexStatsResponse(
                pool_count=stats.pool_count,
                total_tvl=stats.total_tvl,
                volume_24h=stats.volume_24h,
                fees_24h=stats.fees_24h,
            )
            for dex, stats in result.dex_stats.items()
        },
        fetch_status=dict(result.fetch_status),
        pools=[
            PoolResponseItem(
                id=pool.id,
                name=pool.name,
                dex=pool.dex,
                tvl=pool.tvl,
                volume_24h=pool.volume_24h,
                volume_7d=pool.volume_7d,
                volume_30d=pool.volume_30d,
                fees_24h=pool.fees_24h,
                fees_7d=pool.fees_7d,
                fees_30d=pool.fees_30d,
                fee_rate=pool.fee_rate,
                apr=pool.apr,
                apy_base=pool.apy_base,
                apy_reward=pool.apy_reward,
                stablecoin=pool.stablecoin,
            )
            for pool in result.pools
        ],
    )


@router.get("/v1/data-source", response_model=DataSourceResponse)
def get_data_source(
    use_case: FetchPoolDataUseCase = Depends(get_fetch_pool_data_use_case),
):
    info = use_case.describe()
    return DataSourceResponse(current_mode=info.current_mode, available_modes=info.available_modes)


@router.delete("/v1/pools/cache", response_model=ClearCacheResponse)
def clear_pool_cache(
    mode: str | None = None,
    use_case: FetchPoolDataUseCase = Depends(get_fetch_pool_data_use_case),
):
    try:
        use_case.clear_cache(mode)
    except DataSourceModeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    cleared = [mode.strip().lower()] if mode else use_case.available_modes
    return ClearCacheResponse(cleared=cleared)
