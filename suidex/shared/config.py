from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str = "false") -> bool:
    value = (_env(name, default) or "").strip().lower()
    return value in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_source_mode: str
    sui_graphql_url: str
    sui_graphql_timeout_seconds: float
    sui_graphql_max_retries: int
    sui_graphql_initial_backoff_ms: int
    sui_graphql_discover_pools: bool
    defillama_yields_api: str
    defillama_api: str
    bluefin_spot_api: str
    fullsail_api: str
    vendor_timeout_seconds: float
    coingecko_api_base: str
    coingecko_timeout_seconds: float
    native_price_cache_ttl_seconds: float
    native_price_fallback_usd: float
    pool_cache_ttl_seconds: float
    pool_cache_dsn: str
    snapshot_path: str


def get_settings() -> Settings:
    return Settings(
        data_source_mode=_env("DATA_SOURCE_MODE", "defillama"),
        sui_graphql_url=_env("SUI_GRAPHQL_URL", "https://graphql.mainnet.sui.io/graphql"),
        sui_graphql_timeout_seconds=float(_env("SUI_GRAPHQL_TIMEOUT_SECONDS", "15")),
        sui_graphql_max_retries=int(_env("SUI_GRAPHQL_MAX_RETRIES", "3")),
        sui_graphql_initial_backoff_ms=int(_env("SUI_GRAPHQL_INITIAL_BACKOFF_MS", "500")),
        sui_graphql_discover_pools=_bool("SUI_GRAPHQL_DISCOVER_POOLS"),
        defillama_yields_api=_env("DEFILLAMA_YIELDS_API", "https://yields.llama.fi"),
        defillama_api=_env("DEFILLAMA_API", "https://api.llama.fi"),
        bluefin_spot_api=_env("BLUEFIN_SPOT_API", "https://swap.api.sui-prod.bluefin.io/api/v1"),
        fullsail_api=_env("FULLSAIL_API", "https://app.fullsail.finance/api"),
        vendor_timeout_seconds=float(_env("VENDOR_TIMEOUT_SECONDS", "15")),
        coingecko_api_base=_env("COINGECKO_API_BASE", "https://api.coingecko.com/api/v3"),
        coingecko_timeout_seconds=float(_env("COINGECKO_TIMEOUT_SECONDS", "10")),
        native_price_cache_ttl_seconds=float(_env("NATIVE_PRICE_CACHE_TTL_SECONDS", "300")),
        native_price_fallback_usd=float(_env("NATIVE_PRICE_FALLBACK_USD", "4.5")),
        pool_cache_ttl_seconds=float(_env("POOL_CACHE_TTL_SECONDS", "300")),
        pool_cache_dsn=_env("POOL_CACHE_DSN", ""),
        snapshot_path=_env("SNAPSHOT_PATH", "data/dex-data.json"),
    )
