from __future__ import annotations

import logging
from typing import Any

from suidex.application.ports.native_price_port import NativePricePort
from suidex.application.ports.sui_query_port import SuiQueryPort
from suidex.domain.entities.pool import Dex
from suidex.domain.services.field_resolution import Accessor, keys, path, resolve_field, to_float
from suidex.domain.services.token_symbols import extract_token_pair
from suidex.domain.services.tvl_estimation import estimate_tvl
from suidex.infrastructure.clients.sui_graphql_client import move_object_contents
from suidex.infrastructure.fetchers.pool_payload import build_pool_payload, scaled_fee_rate
from suidex.infrastructure.known_pools import (
    BLUEFIN_POOL_TYPE,
    BLUEFIN_POOLS,
    CETUS_POOL_TYPE,
    CETUS_POOLS,
    FULLSAIL_POOL_TYPE,
    FULLSAIL_POOLS,
    KnownPool,
)


logger = logging.getLogger(__name__)

FEE_RATE_FIELDS = keys("fee_rate", "fee")


def _symbols_from_name(name: str) -> tuple[str, str]:
    parts = name.split("/")
    if len(parts) != 2:
        return "", ""
    return parts[0].strip(), parts[1].strip()


class SuiGraphQLPoolFetcher:
    """Reads pool objects straight from chain state.

    Object state has no traded volume, so volumes and fees are ``None`` and
    TVL comes from the reserve-based estimate.
    """

    dex: str = ""
    pool_type: str = ""
    known_pools: tuple[KnownPool, ...] = ()
    reserve_a_fields: tuple[Accessor, ...] = keys("coin_a")
    reserve_b_fields: tuple[Accessor, ...] = keys("coin_b")

    def __init__(
        self,
        *,
        sui: SuiQueryPort,
        price_provider: NativePricePort,
        discover: bool = False,
        page_size: int = 50,
        max_pages: int = 4,
    ):
        self._sui = sui
        self._price_provider = price_provider
        self._discover = discover
        self._page_size = page_size
        self._max_pages = max_pages
        self._names = {pool.id.lower(): pool.name for pool in self.known_pools}

    async def fetch_pools(self) -> list[dict[str, Any]]:
        try:
            nodes = await self._load_nodes()
        except Exception as exc:  # noqa: BLE001
            logger.warning("graphql_pool_fetcher: query_failed dex=%s error=%s", self.dex, exc)
            return []
        if not nodes:
            return []

        native_price = await self._price_provider.get_native_price_usd()
        pools: list[dict[str, Any]] = []
        for node in nodes:
            try:
                pool = self.parse_node(node, native_price_usd=native_price)
            except (TypeError, ValueError, ArithmeticError) as exc:
                logger.warning(
                    "graphql_pool_fetcher: parse_failed dex=%s pool=%s error=%s",
                    self.dex,
                    node.get("address"),
                    exc,
                )
                continue
            if pool is not None:
                pools.append(pool)

        logger.info("graphql_pool_fetcher: fetched dex=%s pools=%s", self.dex, len(pools))
        return pools

    async def _load_nodes(self) -> list[dict[str, Any]]:
        if self._discover:
            nodes: list[dict[str, Any]] = []
            async for node in self._sui.iter_objects_by_type(
                self.pool_type,
                page_size=self._page_size,
                max_pages=self._max_pages,
            ):
                nodes.append(node)
            return nodes
        return await self._sui.query_objects([pool.id for pool in self.known_pools])

    def parse_node(self, node: dict[str, Any], *, native_price_usd: float) -> dict[str, Any] | None:
        type_repr, fields = move_object_contents(node)
        pool_id = node.get("address")
        if not fields or not pool_id:
            return None

        known_name = self._names.get(str(pool_id).lower())
        pair = extract_token_pair(type_repr)
        if pair is None and known_name:
            pair = _symbols_from_name(known_name)
        if known_name:
            name = known_name
        elif pair is not None:
            name = f"{pair[0]}/{pair[1]}"
        else:
            name = "Unknown"
        symbol_a, symbol_b = pair or ("", "")

        tvl = estimate_tvl(
            reserve_a=resolve_field(fields, self.reserve_a_fields, default=0.0, parse=to_float),
            reserve_b=resolve_field(fields, self.reserve_b_fields, default=0.0, parse=to_float),
            symbol_a=symbol_a,
            symbol_b=symbol_b,
            native_price_usd=native_price_usd,
        )
        return build_pool_payload(
            pool_id=str(pool_id),
            name=name,
            dex=self.dex,
            tvl=tvl,
            fee_rate=scaled_fee_rate(resolve_field(fields, FEE_RATE_FIELDS, parse=to_float)),
            apr=0.0,
            apyBase=0.0,
            apyReward=0.0,
        )


class CetusGraphQLPoolFetcher(SuiGraphQLPoolFetcher):
    dex = Dex.CETUS.value
    pool_type = CETUS_POOL_TYPE
    known_pools = CETUS_POOLS


class BluefinGraphQLPoolFetcher(SuiGraphQLPoolFetcher):
    dex = Dex.BLUEFIN.value
    pool_type = BLUEFIN_POOL_TYPE
    known_pools = BLUEFIN_POOLS
    reserve_a_fields = keys("coin_a", "reserve_a") + (path("coin_a", "value"),)
    reserve_b_fields = keys("coin_b", "reserve_b") + (path("coin_b", "value"),)


class FullSailGraphQLPoolFetcher(SuiGraphQLPoolFetcher):
    dex = Dex.FULL_SAIL.value
    pool_type = FULLSAIL_POOL_TYPE
    known_pools = FULLSAIL_POOLS
    reserve_a_fields = keys("coin_a", "coin_x_reserve", "x_reserve", "reserve_x", "coin_x", "balance_x")
    reserve_b_fields = keys("coin_b", "coin_y_reserve", "y_reserve", "reserve_y", "coin_y", "balance_y")


def build_graphql_fetchers(
    *,
    sui: SuiQueryPort,
    price_provider: NativePricePort,
    discover: bool = False,
) -> list[SuiGraphQLPoolFetcher]:
    return [
        fetcher_cls(sui=sui, price_provider=price_provider, discover=discover)
        for fetcher_cls in (CetusGraphQLPoolFetcher, BluefinGraphQLPoolFetcher, FullSailGraphQLPoolFetcher)
    ]
