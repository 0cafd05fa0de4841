from __future__ import annotations

import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

DEFAULT_BLUEFIN_SPOT_API = "https://swap.api.sui-prod.bluefin.io/api/v1"


class BluefinSpotApiError(RuntimeError):
    pass


def _unwrap_pools(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        for envelope in ("pools", "data"):
            inner = payload.get(envelope)
            if isinstance(inner, list):
                payload = inner
                break
    if not isinstance(payload, list):
        raise BluefinSpotApiError("Bluefin Spot API returned no pool list.")
    return [row for row in payload if isinstance(row, dict)]


class BluefinSpotClient:
    def __init__(
        self,
        api_base: str = DEFAULT_BLUEFIN_SPOT_API,
        timeout_seconds: float = 15.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport

    async def list_pools(self) -> list[dict[str, Any]]:
        url = f"{self.api_base}/pools/info"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            try:
                payload = response.json()
            except ValueError as exc:
                raise BluefinSpotApiError("Bluefin Spot API response is not JSON.") from exc
        pools = _unwrap_pools(payload)
        logger.info("bluefin_sdk_client: fetched_pools rows=%s", len(pools))
        return pools

    async def get_pool(self, pool_id: str) -> dict[str, Any] | None:
        target = pool_id.lower()
        for pool in await self.list_pools():
            address = pool.get("address") or pool.get("poolAddress") or pool.get("id")
            if isinstance(address, str) and address.lower() == target:
                return pool
        return None
