from __future__ import annotations

import logging
import time
from typing import Callable

import httpx


logger = logging.getLogger(__name__)

SUI_COINGECKO_ID = "sui"
DEFAULT_FALLBACK_PRICE_USD = 4.5


class CoingeckoNativePriceProvider:
    """SUI/USD spot price with a TTL cache and a configured fallback.

    TVL estimation must keep working when CoinGecko is rate limited, so a
    failed lookup returns the fallback price instead of raising.
    """

    def __init__(
        self,
        api_base: str,
        timeout_seconds: float,
        *,
        cache_ttl_seconds: float = 300,
        fallback_price_usd: float = DEFAULT_FALLBACK_PRICE_USD,
        coin_id: str = SUI_COINGECKO_ID,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self.fallback_price_usd = fallback_price_usd
        self.coin_id = coin_id
        self._transport = transport
        self._clock = clock
        self._cached: tuple[float, float] | None = None

    def _cache_get(self) -> float | None:
        if self.cache_ttl_seconds <= 0 or self._cached is None:
            return None
        expires_at, value = self._cached
        if expires_at <= self._clock():
            self._cached = None
            return None
        return value

    def _cache_set(self, value: float) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        self._cached = (self._clock() + self.cache_ttl_seconds, value)

    async def get_native_price_usd(self) -> float:
        cached = self._cache_get()
        if cached is not None:
            return cached

        url = f"{self.api_base}/simple/price"
        params = {"ids": self.coin_id, "vs_currencies": "usd"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
            value = float(payload[self.coin_id]["usd"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "native_price_provider: lookup_failed coin=%s fallback=%s error=%s",
                self.coin_id,
                self.fallback_price_usd,
                exc,
            )
            return self.fallback_price_usd

        if value <= 0:
            return self.fallback_price_usd
        self._cache_set(value)
        return value
