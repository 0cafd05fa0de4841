from __future__ import annotations

from typing import Protocol

DailyValues = tuple[int, dict[str, float]]


class DexHistoryPort(Protocol):
    async def get_volume_breakdown(self) -> list[DailyValues]:
        ...

    async def get_fee_breakdown(self) -> list[DailyValues]:
        ...

    async def get_dex_tvl(self, dex: str) -> float | None:
        ...
