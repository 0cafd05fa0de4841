from __future__ import annotations

import logging
from typing import Any

from suidex.application.ports.sui_query_port import SuiQueryPort
from suidex.domain.services.token_symbols import split_type_params
from suidex.infrastructure.clients.sui_graphql_client import move_object_contents
from suidex.infrastructure.known_pools import CETUS_POOL_TYPE


logger = logging.getLogger(__name__)


class CetusSdkClient:
    """Pool lookups shaped like the Cetus CLMM SDK ``Pool.getPool`` result.

    Cetus ships no Python SDK; the same object state is read from the chain
    and projected onto the SDK field names.
    """

    def __init__(self, sui: SuiQueryPort, *, pool_type: str = CETUS_POOL_TYPE, max_pages: int = 4):
        self._sui = sui
        self._pool_type = pool_type
        self._max_pages = max_pages

    async def get_pool(self, pool_id: str) -> dict[str, Any] | None:
        node = await self._sui.query_object(pool_id)
        if node is None:
            logger.info("cetus_sdk_client: pool_not_found pool=%s", pool_id)
            return None
        return self._to_sdk_pool(node)

    async def list_pools(self) -> list[dict[str, Any]]:
        pools: list[dict[str, Any]] = []
        async for node in self._sui.iter_objects_by_type(self._pool_type, max_pages=self._max_pages):
            pool = self._to_sdk_pool(node)
            if pool is not None:
                pools.append(pool)
        return pools

    @staticmethod
    def _to_sdk_pool(node: dict[str, Any]) -> dict[str, Any] | None:
        type_repr, fields = move_object_contents(node)
        if not fields:
            return None
        coin_types = split_type_params(type_repr or "")
        return {
            "poolAddress": node.get("address"),
            "poolType": type_repr,
            "coinTypeA": coin_types[0] if len(coin_types) > 0 else "",
            "coinTypeB": coin_types[1] if len(coin_types) > 1 else "",
            "coinAmountA": fields.get("coin_a"),
            "coinAmountB": fields.get("coin_b"),
            "current_sqrt_price": fields.get("current_sqrt_price"),
            "current_tick_index": fields.get("current_tick_index"),
            "liquidity": fields.get("liquidity"),
            "fee_rate": fields.get("fee_rate"),
            "is_pause": fields.get("is_pause"),
        }
