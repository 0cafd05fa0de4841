from __future__ import annotations

from typing import Any, Protocol


class VendorPoolSdkPort(Protocol):
    async def list_pools(self) -> list[dict[str, Any]]:
        ...

    async def get_pool(self, pool_id: str) -> dict[str, Any] | None:
        ...
