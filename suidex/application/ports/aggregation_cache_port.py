from __future__ import annotations

from typing import Protocol

from suidex.domain.entities.cache import CacheEntry


class AggregationCachePort(Protocol):
    def get(self, key: str) -> CacheEntry | None:
        ...

    def set(self, key: str, entry: CacheEntry) -> None:
        ...

    def invalidate(self, key: str) -> None:
        ...
