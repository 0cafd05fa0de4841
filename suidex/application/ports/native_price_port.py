from __future__ import annotations

from typing import Protocol


class NativePricePort(Protocol):
    async def get_native_price_usd(self) -> float:
        ...
