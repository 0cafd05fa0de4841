from __future__ import annotations

import asyncio
import logging
from typing import Any

from suidex.application.ports.native_price_port import NativePricePort
from suidex.application.ports.pool_fetcher_port import PoolFetcherPort
from suidex.application.ports.vendor_pool_sdk_port import VendorPoolSdkPort
from suidex.domain.entities.pool import Dex
from suidex.domain.services.field_resolution import keys, path, resolve_field, to_float, to_str
from suidex.domain.services.token_symbols import extract_symbol
from suidex.domain.services.tvl_estimation import estimate_tvl
from suidex.infrastructure.clients.fullsail_sdk_client import FullSailSdkClient
from suidex.infrastructure.fetchers.pool_payload import build_pool_payload, scaled_fee_rate
from suidex.infrastructure.known_pools import CETUS_POOLS, FULLSAIL_POOLS, KnownPool


logger = logging.getLogger(__name__)


CETUS_FIELDS = {
    "id": keys("poolAddress", "pool_address", "address"),
    "coin_type_a": keys("coinTypeA", "coin_type_a"),
    "coin_type_b": keys("coinTypeB", "coin_type_b"),
    "reserve_a": keys("coinAmountA", "coin_a"),
    "reserve_b": keys("coinAmountB", "coin_b"),
    "liquidity": keys("liquidity", "current_liquidity"),
    "sqrt_price": keys("current_sqrt_price", "sqrtPrice"),
    "fee_rate": keys("fee_rate", "feeRate"),
}

BLUEFIN_FIELDS = {
    "id": keys("address", "poolAddress", "pool_address", "id"),
    "name": keys("name", "symbol"),
    "symbol_a": (path("tokenA", "info", "symbol"), path("tokenA", "symbol"), path("baseSymbol")),
    "symbol_b": (path("tokenB", "info", "symbol"), path("tokenB", "symbol"), path("quoteSymbol")),
    "tvl": keys("tvl", "totalValueLocked", "liquidity", "tvlUsd"),
    "volume_24h": keys("volume24h", "volume_24h", "dailyVolume") + (path("day", "volume"),),
    "volume_7d": keys("volume7d", "volume_7d") + (path("week", "volume"),),
    "volume_30d": keys("volume30d", "volume_30d") + (path("month", "volume"),),
    "fees_24h": keys("fees24h", "fees_24h", "dailyFees") + (path("day", "fee"),),
    "fees_7d": keys("fees7d", "fees_7d") + (path("week", "fee"),),
    "fees_30d": keys("fees30d", "fees_30d") + (path("month", "fee"),),
    "fee_rate": keys("feeRate", "fee_rate", "swapFee"),
    "apr": keys("apr", "apy") + (path("day", "apr", "total"),),
}

FULLSAIL_STATS_FIELDS = {
    "tvl": keys("tvl"),
    "volume_24h": keys("volume_usd_24h"),
    "volume_7d": keys("volume_usd_7d"),
    "volume_30d": keys("volume_usd_30d"),
    "fees_24h": keys("fees_usd_24h"),
    "fees_7d": keys("fees_usd_7d"),
    "fees_30d": keys("fees_usd_30d"),
}

BLUEFIN_TOP_POOLS = 50


def _known_name(known_pools: tuple[KnownPool, ...]) -> dict[str, str]:
    return {pool.id.lower(): pool.name for pool in known_pools}


class CetusSdkPoolFetcher:
    dex = Dex.CETUS.value

    def __init__(
        self,
        *,
        client: VendorPoolSdkPort,
        price_provider: NativePricePort,
        known_pools: tuple[KnownPool, ...] = CETUS_POOLS,
    ):
        self._client = client
        self._price_provider = price_provider
        self._known_pools = known_pools

    async def fetch_pools(self) -> list[dict[str, Any]]:
        try:
            results = await asyncio.gather(
                *(self._client.get_pool(pool.id) for pool in self._known_pools),
                return_exceptions=True,
            )
            native_price = await self._price_provider.get_native_price_usd()
        except Exception as exc:  # noqa: BLE001
            logger.warning("sdk_pool_fetcher: fetch_failed dex=%s error=%s", self.dex, exc)
            return []

        pools: list[dict[str, Any]] = []
        for known, result in zip(self._known_pools, results):
            if isinstance(result, Exception):
                logger.warning(
                    "sdk_pool_fetcher: pool_failed dex=%s pool=%s error=%s",
                    self.dex,
                    known.id,
                    result,
                )
                continue
            if result is None:
                continue
            pool = self.parse_pool(result, known, native_price_usd=native_price)
            if pool is not None:
                pools.append(pool)

        logger.info("sdk_pool_fetcher: fetched dex=%s pools=%s", self.dex, len(pools))
        return pools

    def parse_pool(
        self,
        raw: dict[str, Any],
        known: KnownPool | None,
        *,
        native_price_usd: float,
    ) -> dict[str, Any] | None:
        pool_id = resolve_field(raw, CETUS_FIELDS["id"], parse=to_str) or (known.id if known else None)
        if not pool_id:
            return None

        symbol_a = extract_symbol(resolve_field(raw, CETUS_FIELDS["coin_type_a"], parse=to_str))
        symbol_b = extract_symbol(resolve_field(raw, CETUS_FIELDS["coin_type_b"], parse=to_str))
        name = known.name if known else f"{symbol_a}/{symbol_b}"

        reserve_a = resolve_field(raw, CETUS_FIELDS["reserve_a"], default=0.0, parse=to_float)
        reserve_b = resolve_field(raw, CETUS_FIELDS["reserve_b"], default=0.0, parse=to_float)
        liquidity = resolve_field(raw, CETUS_FIELDS["liquidity"], default=0.0, parse=to_float)
        tvl = estimate_tvl(
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            symbol_a=symbol_a,
            symbol_b=symbol_b,
            native_price_usd=native_price_usd,
        )
        if tvl <= 0 and liquidity <= 0:
            return None

        # Volume, fees and APR need the Cetus indexer; the pool object does not carry them.
        return build_pool_payload(
            pool_id=pool_id,
            name=name,
            dex=self.dex,
            tvl=tvl,
            fee_rate=scaled_fee_rate(resolve_field(raw, CETUS_FIELDS["fee_rate"], parse=to_float)),
            apr=None,
            apyBase=None,
            apyReward=None,
        )


class BluefinSdkPoolFetcher:
    dex = Dex.BLUEFIN.value

    def __init__(self, *, client: VendorPoolSdkPort, limit: int = BLUEFIN_TOP_POOLS):
        self._client = client
        self._limit = limit

    async def fetch_pools(self) -> list[dict[str, Any]]:
        try:
            rows = await self._client.list_pools()
        except Exception as exc:  # noqa: BLE001
            logger.warning("sdk_pool_fetcher: fetch_failed dex=%s error=%s", self.dex, exc)
            return []

        pools = [pool for pool in (self.parse_pool(row) for row in rows) if pool is not None]
        pools = [pool for pool in pools if pool["tvl"] is not None and pool["tvl"] > 0]
        pools.sort(key=lambda pool: pool["tvl"], reverse=True)
        logger.info("sdk_pool_fetcher: fetched dex=%s pools=%s listed=%s", self.dex, len(pools), len(rows))
        return pools[: self._limit]

    def parse_pool(self, raw: dict[str, Any]) -> dict[str, Any] | None:
        pool_id = resolve_field(raw, BLUEFIN_FIELDS["id"], parse=to_str)
        if pool_id is None:
            return None
        name = resolve_field(raw, BLUEFIN_FIELDS["name"], parse=to_str)
        if name is None:
            symbol_a = resolve_field(raw, BLUEFIN_FIELDS["symbol_a"], default="Unknown", parse=to_str)
            symbol_b = resolve_field(raw, BLUEFIN_FIELDS["symbol_b"], default="Unknown", parse=to_str)
            name = f"{symbol_a}/{symbol_b}"

        fee_rate = resolve_field(raw, BLUEFIN_FIELDS["fee_rate"], parse=to_float)
        if fee_rate is not None and fee_rate >= 1:
            fee_rate = scaled_fee_rate(fee_rate)

        metrics = {
            field_name: resolve_field(raw, BLUEFIN_FIELDS[field_name], parse=to_float)
            for field_name in ("tvl", "volume_24h", "volume_7d", "volume_30d", "fees_24h", "fees_7d", "fees_30d")
        }
        return build_pool_payload(
            pool_id=pool_id,
            name=name,
            dex=self.dex,
            fee_rate=fee_rate,
            apr=resolve_field(raw, BLUEFIN_FIELDS["apr"], default=0.0, parse=to_float),
            apyBase=resolve_field(raw, keys("apyBase"), default=0.0, parse=to_float),
            apyReward=resolve_field(raw, keys("apyReward"), default=0.0, parse=to_float),
            **metrics,
        )


class FullSailSdkPoolFetcher:
    dex = Dex.FULL_SAIL.value

    def __init__(
        self,
        *,
        client: FullSailSdkClient,
        known_pools: tuple[KnownPool, ...] = FULLSAIL_POOLS,
    ):
        self._client = client
        self._known_pools = known_pools

    async def fetch_pools(self) -> list[dict[str, Any]]:
        results = await asyncio.gather(
            *(self._fetch_pool(pool) for pool in self._known_pools),
            return_exceptions=True,
        )
        pools: list[dict[str, Any]] = []
        for known, result in zip(self._known_pools, results):
            if isinstance(result, Exception):
                logger.warning(
                    "sdk_pool_fetcher: pool_failed dex=%s pool=%s error=%s",
                    self.dex,
                    known.id,
                    result,
                )
                continue
            if result is not None:
                pools.append(result)
        logger.info("sdk_pool_fetcher: fetched dex=%s pools=%s", self.dex, len(pools))
        return pools

    async def _fetch_pool(self, known: KnownPool) -> dict[str, Any] | None:
        try:
            backend_pool = await self._client.get_pool(known.id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "sdk_pool_fetcher: backend_failed dex=%s pool=%s error=%s",
                self.dex,
                known.id,
                exc,
            )
            backend_pool = None

        if backend_pool and isinstance(backend_pool.get("dinamic_stats"), dict):
            return self.parse_backend_pool(backend_pool, known)

        chain_pool = await self._client.get_pool_from_chain(known.id)
        if chain_pool is None:
            return None
        return self.parse_chain_pool(chain_pool, known)

    def parse_backend_pool(self, raw: dict[str, Any], known: KnownPool) -> dict[str, Any]:
        stats = raw["dinamic_stats"]
        apr = resolve_field(stats, keys("apr"), parse=to_float)
        if apr is None:
            apr = resolve_field(raw, keys("full_apr"), default=0.0, parse=to_float)
        metrics = {
            field_name: resolve_field(stats, accessors, parse=to_float)
            for field_name, accessors in FULLSAIL_STATS_FIELDS.items()
        }
        return build_pool_payload(
            pool_id=known.id,
            name=resolve_field(raw, keys("name"), default=known.name, parse=to_str),
            dex=self.dex,
            fee_rate=scaled_fee_rate(resolve_field(raw, keys("fee"), parse=to_float)),
            apr=apr,
            apyBase=resolve_field(stats, keys("apr"), default=0.0, parse=to_float),
            apyReward=0.0,
            **metrics,
        )

    def parse_chain_pool(self, raw: dict[str, Any], known: KnownPool) -> dict[str, Any]:
        # Concentrated-liquidity TVL needs the tick distribution, which only the backend computes.
        return build_pool_payload(
            pool_id=known.id,
            name=known.name,
            dex=self.dex,
            tvl=None,
            fee_rate=scaled_fee_rate(resolve_field(raw, keys("feeRate", "fee_rate"), parse=to_float)),
            apr=None,
            apyBase=None,
            apyReward=0.0,
        )


def build_sdk_fetchers(
    *,
    cetus: VendorPoolSdkPort,
    bluefin: VendorPoolSdkPort,
    fullsail: FullSailSdkClient,
    price_provider: NativePricePort,
) -> list[PoolFetcherPort]:
    return [
        CetusSdkPoolFetcher(client=cetus, price_provider=price_provider),
        BluefinSdkPoolFetcher(client=bluefin),
        FullSailSdkPoolFetcher(client=fullsail),
    ]
