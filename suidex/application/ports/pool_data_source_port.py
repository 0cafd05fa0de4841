from __future__ import annotations

from typing import Protocol

from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.domain.entities.pool import AggregationResult


class PoolDataSourcePort(Protocol):
    async def execute(self, command: FetchPoolDataInput) -> AggregationResult:
        ...

    def clear_cache(self) -> None:
        ...
