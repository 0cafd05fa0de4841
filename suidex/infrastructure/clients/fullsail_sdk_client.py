from __future__ import annotations

import logging
from typing import Any

import httpx

from suidex.application.ports.sui_query_port import SuiQueryPort
from suidex.domain.services.token_symbols import split_type_params
from suidex.infrastructure.clients.sui_graphql_client import move_object_contents


logger = logging.getLogger(__name__)

DEFAULT_FULLSAIL_API = "https://app.fullsail.finance/api"


class FullSailApiError(RuntimeError):
    pass


def _unwrap_pool(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    for envelope in ("pool", "data"):
        inner = payload.get(envelope)
        if isinstance(inner, dict):
            return inner
    return payload or None


class FullSailSdkClient:
    """Full Sail pool lookups: the backend first, the chain object second.

    The backend carries the pre-computed ``dinamic_stats`` block (TVL from
    tick liquidity, volumes, fees, APR); the chain object only exposes raw
    liquidity and the fee rate.
    """

    def __init__(
        self,
        sui: SuiQueryPort,
        api_base: str = DEFAULT_FULLSAIL_API,
        timeout_seconds: float = 15.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._sui = sui
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport

    async def get_pool(self, pool_id: str) -> dict[str, Any] | None:
        url = f"{self.api_base}/pools/{pool_id}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            if response.status_code == 404:
                return None
            response.raise_for_status()
            try:
                payload = response.json()
            except ValueError as exc:
                raise FullSailApiError("Full Sail backend response is not JSON.") from exc
        return _unwrap_pool(payload)

    async def list_pools(self) -> list[dict[str, Any]]:
        url = f"{self.api_base}/pools"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            try:
                payload = response.json()
            except ValueError as exc:
                raise FullSailApiError("Full Sail backend response is not JSON.") from exc
        rows = payload
        if isinstance(payload, dict):
            rows = payload.get("pools") or payload.get("data")
        if not isinstance(rows, list):
            raise FullSailApiError("Full Sail backend returned no pool list.")
        return [row for row in rows if isinstance(row, dict)]

    async def get_pool_from_chain(self, pool_id: str) -> dict[str, Any] | None:
        node = await self._sui.query_object(pool_id)
        type_repr, fields = move_object_contents(node)
        if not fields:
            logger.info("fullsail_sdk_client: chain_pool_not_found pool=%s", pool_id)
            return None
        coin_types = split_type_params(type_repr or "")
        return {
            "id": (node or {}).get("address") or pool_id,
            "poolType": type_repr,
            "coinTypeA": coin_types[0] if len(coin_types) > 0 else "",
            "coinTypeB": coin_types[1] if len(coin_types) > 1 else "",
            "feeRate": fields.get("fee_rate"),
            "liquidity": fields.get("liquidity"),
            "currentSqrtPrice": fields.get("current_sqrt_price"),
        }
