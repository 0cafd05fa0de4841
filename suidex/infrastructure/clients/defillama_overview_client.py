from __future__ import annotations

import logging
from typing import Any

import httpx

from suidex.infrastructure.clients.defillama_client import DefiLlamaResponseError


logger = logging.getLogger(__name__)

DEFAULT_DEFILLAMA_API = "https://api.llama.fi"
SUI_CHAIN_SLUG = "sui"

# DefiLlama protocol display names in the chain overview breakdowns.
OVERVIEW_DEX_NAMES = {
    "Cetus CLMM": "Cetus",
    "Bluefin Spot": "Bluefin",
    "Full Sail": "Full Sail",
}

TVL_PROTOCOL_SLUGS = {
    "Cetus": "cetus-amm",
    "Bluefin": "bluefin-spot",
    "Full Sail": "full-sail",
}


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class DefiLlamaOverviewClient:
    """DefiLlama chain overviews (daily DEX volume and fees) and protocol TVL."""

    def __init__(
        self,
        api_base: str = DEFAULT_DEFILLAMA_API,
        timeout_seconds: float = 30.0,
        *,
        chain: str = SUI_CHAIN_SLUG,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self.chain = chain
        self._transport = transport

    async def get_volume_breakdown(self) -> list[tuple[int, dict[str, float]]]:
        return await self._breakdown(f"/overview/dexs/{self.chain}")

    async def get_fee_breakdown(self) -> list[tuple[int, dict[str, float]]]:
        return await self._breakdown(f"/overview/fees/{self.chain}")

    async def get_dex_tvl(self, dex: str) -> float | None:
        slug = TVL_PROTOCOL_SLUGS.get(dex)
        if slug is None:
            return None
        value = _as_number(await self._get_json(f"/tvl/{slug}"))
        if value is None:
            raise DefiLlamaResponseError(f"DefiLlama TVL for {slug} is not a number.")
        return value

    async def _breakdown(self, path: str) -> list[tuple[int, dict[str, float]]]:
        payload = await self._get_json(path)
        if not isinstance(payload, dict):
            raise DefiLlamaResponseError(f"Invalid DefiLlama overview response for {path}.")
        rows = payload.get("totalDataChartBreakdown") or []
        if not isinstance(rows, list):
            raise DefiLlamaResponseError(f"Invalid DefiLlama overview breakdown for {path}.")

        entries: list[tuple[int, dict[str, float]]] = []
        for row in rows:
            if not isinstance(row, (list, tuple)) or len(row) != 2 or not isinstance(row[1], dict):
                continue
            timestamp = _as_number(row[0])
            if timestamp is None:
                continue
            values = {}
            for name, raw in row[1].items():
                dex = OVERVIEW_DEX_NAMES.get(name)
                value = _as_number(raw)
                if dex is not None and value is not None:
                    values[dex] = value
            entries.append((int(timestamp), values))
        logger.info("defillama_overview_client: fetched_breakdown path=%s days=%s", path, len(entries))
        return entries

    async def _get_json(self, path: str) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(f"{self.api_base}{path}")
            response.raise_for_status()
            try:
                return response.json()
            except ValueError as exc:
                raise DefiLlamaResponseError(f"DefiLlama response for {path} is not JSON.") from exc
