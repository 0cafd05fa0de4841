from __future__ import annotations

from typing import Any, Protocol


class PoolFetcherPort(Protocol):
    dex: str

    async def fetch_pools(self) -> list[dict[str, Any]]:
        ...
