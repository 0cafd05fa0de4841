from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

DEFAULT_YIELDS_API = "https://yields.llama.fi"


class DefiLlamaResponseError(RuntimeError):
    pass


class DefiLlamaYieldsClient:
    """Client for the DefiLlama yields ``/pools`` listing.

    The listing covers every chain and weighs several megabytes; the three
    per-DEX fetchers of one aggregation pass share a single in-flight request.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_YIELDS_API,
        timeout_seconds: float = 30.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport
        self._inflight: asyncio.Future[list[dict[str, Any]]] | None = None

    async def list_pools(self) -> list[dict[str, Any]]:
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._fetch_pools())
        return await self._inflight

    async def _fetch_pools(self) -> list[dict[str, Any]]:
        url = f"{self.api_base}/pools"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            try:
                payload = response.json()
            except ValueError as exc:
                raise DefiLlamaResponseError("DefiLlama pools response is not JSON.") from exc

        rows = payload
        if isinstance(payload, dict):
            rows = payload.get("data")
        if not isinstance(rows, list):
            raise DefiLlamaResponseError("Invalid DefiLlama pools response.")
        logger.info("defillama_client: fetched_pools rows=%s", len(rows))
        return [row for row in rows if isinstance(row, dict)]
