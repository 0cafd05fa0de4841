from __future__ import annotations

from functools import lru_cache

from suidex.application.ports.aggregation_cache_port import AggregationCachePort
from suidex.application.ports.pool_data_source_port import PoolDataSourcePort
from suidex.application.use_cases.aggregate_pools import AggregatePoolsUseCase
from suidex.application.use_cases.export_snapshot import ExportSnapshotUseCase
from suidex.application.use_cases.get_dex_history import GetDexHistoryUseCase
from suidex.application.use_cases.fetch_pool_data import (
    MODE_DEFILLAMA,
    MODE_GRAPHQL,
    MODE_SDK,
    MODE_SNAPSHOT,
    FetchPoolDataUseCase,
)
from suidex.infrastructure.cache.memory_cache import InMemoryAggregationCache
from suidex.infrastructure.clients.bluefin_sdk_client import BluefinSpotClient
from suidex.infrastructure.clients.cetus_sdk_client import CetusSdkClient
from suidex.infrastructure.clients.defillama_client import DefiLlamaYieldsClient
from suidex.infrastructure.clients.defillama_overview_client import DefiLlamaOverviewClient
from suidex.infrastructure.clients.fullsail_sdk_client import FullSailSdkClient
from suidex.infrastructure.clients.native_price_provider import CoingeckoNativePriceProvider
from suidex.infrastructure.clients.sui_graphql_client import (
    SuiGraphQLClient,
    SuiGraphQLClientSettings,
)
from suidex.infrastructure.db.engine import get_engine
from suidex.infrastructure.db.repositories.aggregation_cache_repository import (
    SqlAggregationCacheRepository,
)
from suidex.infrastructure.fetchers.defillama_pool_fetchers import build_defillama_fetchers
from suidex.infrastructure.fetchers.graphql_pool_fetchers import build_graphql_fetchers
from suidex.infrastructure.fetchers.sdk_pool_fetchers import build_sdk_fetchers
from suidex.infrastructure.snapshot.json_snapshot import JsonSnapshotPoolDataSource, JsonSnapshotWriter
from suidex.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_sui_graphql_client() -> SuiGraphQLClient:
    settings = get_settings()
    return SuiGraphQLClient(
        SuiGraphQLClientSettings(
            url=settings.sui_graphql_url,
            timeout_seconds=settings.sui_graphql_timeout_seconds,
            max_retries=settings.sui_graphql_max_retries,
            initial_backoff_ms=settings.sui_graphql_initial_backoff_ms,
        )
    )


@lru_cache(maxsize=1)
def _get_native_price_provider() -> CoingeckoNativePriceProvider:
    settings = get_settings()
    return CoingeckoNativePriceProvider(
        api_base=settings.coingecko_api_base,
        timeout_seconds=settings.coingecko_timeout_seconds,
        cache_ttl_seconds=settings.native_price_cache_ttl_seconds,
        fallback_price_usd=settings.native_price_fallback_usd,
    )


@lru_cache(maxsize=1)
def _get_aggregation_cache() -> AggregationCachePort:
    settings = get_settings()
    if not settings.pool_cache_dsn:
        return InMemoryAggregationCache()
    repository = SqlAggregationCacheRepository(get_engine(settings.pool_cache_dsn))
    repository.ensure_schema()
    return repository


def _build_data_sources() -> dict[str, PoolDataSourcePort]:
    settings = get_settings()
    cache = _get_aggregation_cache()
    sui = _get_sui_graphql_client()
    price_provider = _get_native_price_provider()

    defillama = AggregatePoolsUseCase(
        mode=MODE_DEFILLAMA,
        fetchers=build_defillama_fetchers(
            DefiLlamaYieldsClient(
                api_base=settings.defillama_yields_api,
                timeout_seconds=settings.vendor_timeout_seconds,
            )
        ),
        cache=cache,
        ttl_seconds=settings.pool_cache_ttl_seconds,
    )
    graphql = AggregatePoolsUseCase(
        mode=MODE_GRAPHQL,
        fetchers=build_graphql_fetchers(
            sui=sui,
            price_provider=price_provider,
            discover=settings.sui_graphql_discover_pools,
        ),
        cache=cache,
        ttl_seconds=settings.pool_cache_ttl_seconds,
    )
    sdk = AggregatePoolsUseCase(
        mode=MODE_SDK,
        fetchers=build_sdk_fetchers(
            cetus=CetusSdkClient(sui),
            bluefin=BluefinSpotClient(
                api_base=settings.bluefin_spot_api,
                timeout_seconds=settings.vendor_timeout_seconds,
            ),
            fullsail=FullSailSdkClient(
                sui,
                api_base=settings.fullsail_api,
                timeout_seconds=settings.vendor_timeout_seconds,
            ),
            price_provider=price_provider,
        ),
        cache=cache,
        ttl_seconds=settings.pool_cache_ttl_seconds,
        empty_is_failure=True,
    )
    return {
        MODE_DEFILLAMA: defillama,
        MODE_GRAPHQL: graphql,
        MODE_SDK: sdk,
        MODE_SNAPSHOT: JsonSnapshotPoolDataSource(settings.snapshot_path),
    }


@lru_cache(maxsize=1)
def get_fetch_pool_data_use_case() -> FetchPoolDataUseCase:
    settings = get_settings()
    return FetchPoolDataUseCase(
        sources=_build_data_sources(),
        configured_mode=settings.data_source_mode,
    )


def get_export_snapshot_use_case(output_path: str | None = None) -> ExportSnapshotUseCase:
    settings = get_settings()
    return ExportSnapshotUseCase(
        fetch_pool_data=get_fetch_pool_data_use_case(),
        writer=JsonSnapshotWriter(output_path or settings.snapshot_path),
    )


@lru_cache(maxsize=1)
def get_dex_history_use_case() -> GetDexHistoryUseCase:
    settings = get_settings()
    return GetDexHistoryUseCase(
        source=DefiLlamaOverviewClient(
            api_base=settings.defillama_api,
            timeout_seconds=settings.vendor_timeout_seconds,
        )
    )
