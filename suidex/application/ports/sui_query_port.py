from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol


class SuiQueryPort(Protocol):
    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        ...

    async def query_object(self, address: str) -> dict[str, Any] | None:
        ...

    async def query_objects(self, addresses: list[str]) -> list[dict[str, Any]]:
        ...

    def iter_objects_by_type(
        self,
        object_type: str,
        *,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        ...
