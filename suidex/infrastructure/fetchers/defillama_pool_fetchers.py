from __future__ import annotations

import logging
from typing import Any

from suidex.domain.entities.pool import Dex
from suidex.domain.services.field_resolution import keys, resolve_field, to_float, to_str
from suidex.infrastructure.clients.defillama_client import DefiLlamaYieldsClient
from suidex.infrastructure.fetchers.pool_payload import build_pool_payload


logger = logging.getLogger(__name__)

SUI_CHAIN = "Sui"
THIRTY_DAYS_FROM_WEEK = 4.28
ESTIMATED_SWAP_FEE = 0.0025
DAYS_PER_YEAR = 365

PROJECT_SLUGS: dict[str, tuple[str, ...]] = {
    Dex.CETUS.value: ("cetus-clmm",),
    Dex.BLUEFIN.value: ("bluefin-spot",),
    Dex.FULL_SAIL.value: ("full-sail",),
}

YIELD_FIELDS = (("apy", "apr"), ("apyBase", "apyBase"), ("apyReward", "apyReward"))


def _times(value: float | None, factor: float) -> float | None:
    return value * factor if value is not None else None


def estimate_volume_30d(volume_24h: float | None, volume_7d: float | None) -> float | None:
    if volume_7d is not None and volume_7d > 0:
        return volume_7d * THIRTY_DAYS_FROM_WEEK
    return _times(volume_24h, 30)


def derive_fees(
    *,
    tvl: float | None,
    apy_base: float | None,
    volume_24h: float | None,
    volume_7d: float | None,
    volume_30d: float | None,
) -> tuple[float | None, float | None, float | None]:
    """Fees from the base APY (fees / TVL) when known, else 0.25 % of volume."""
    if apy_base is not None and apy_base > 0 and tvl is not None:
        daily = tvl * apy_base / (100 * DAYS_PER_YEAR)
        return daily, daily * 7, daily * 30
    return (
        _times(volume_24h, ESTIMATED_SWAP_FEE),
        _times(volume_7d, ESTIMATED_SWAP_FEE),
        _times(volume_30d, ESTIMATED_SWAP_FEE),
    )


def map_yield_pool(raw: dict[str, Any], dex: str) -> dict[str, Any] | None:
    pool_id = resolve_field(raw, keys("pool"), parse=to_str)
    if pool_id is None:
        return None

    tvl = resolve_field(raw, keys("tvlUsd"), parse=to_float)
    volume_24h = resolve_field(raw, keys("volumeUsd1d"), parse=to_float)
    volume_7d = resolve_field(raw, keys("volumeUsd7d"), parse=to_float)
    volume_30d = estimate_volume_30d(volume_24h, volume_7d)
    fees_24h, fees_7d, fees_30d = derive_fees(
        tvl=tvl,
        apy_base=resolve_field(raw, keys("apyBase"), parse=to_float),
        volume_24h=volume_24h,
        volume_7d=volume_7d,
        volume_30d=volume_30d,
    )
    stablecoin = raw.get("stablecoin")

    return build_pool_payload(
        pool_id=pool_id,
        name=resolve_field(raw, keys("symbol"), default="Unknown", parse=to_str),
        dex=dex,
        tvl=tvl,
        volume_24h=volume_24h,
        volume_7d=volume_7d,
        volume_30d=volume_30d,
        fees_24h=fees_24h,
        fees_7d=fees_7d,
        fees_30d=fees_30d,
        stablecoin=stablecoin if isinstance(stablecoin, bool) else None,
        **{target: raw[source] for source, target in YIELD_FIELDS if source in raw},
    )


def _is_listed(pool: dict[str, Any]) -> bool:
    tvl = resolve_field(pool, keys("tvl"), default=0.0, parse=to_float)
    apr = resolve_field(pool, keys("apr"), default=0.0, parse=to_float)
    return tvl > 0 or apr > 0


class DefiLlamaPoolFetcher:
    """Pools of one DEX taken from the shared DefiLlama yields listing."""

    def __init__(
        self,
        *,
        dex: str,
        client: DefiLlamaYieldsClient,
        project_slugs: tuple[str, ...] | None = None,
    ):
        self.dex = dex
        self._client = client
        self._project_slugs = frozenset(
            slug.lower() for slug in (project_slugs or PROJECT_SLUGS.get(dex, ()))
        )

    async def fetch_pools(self) -> list[dict[str, Any]]:
        try:
            rows = await self._client.list_pools()
        except Exception as exc:  # noqa: BLE001
            logger.warning("defillama_pool_fetcher: listing_failed dex=%s error=%s", self.dex, exc)
            return []

        pools: list[dict[str, Any]] = []
        for row in rows:
            if row.get("chain") != SUI_CHAIN:
                continue
            if str(row.get("project") or "").lower() not in self._project_slugs:
                continue
            pool = map_yield_pool(row, self.dex)
            if pool is not None and _is_listed(pool):
                pools.append(pool)

        logger.info("defillama_pool_fetcher: fetched dex=%s pools=%s", self.dex, len(pools))
        return pools


def build_defillama_fetchers(client: DefiLlamaYieldsClient) -> list[DefiLlamaPoolFetcher]:
    return [DefiLlamaPoolFetcher(dex=dex, client=client) for dex in PROJECT_SLUGS]
