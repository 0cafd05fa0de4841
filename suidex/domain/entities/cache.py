from __future__ import annotations

from dataclasses import dataclass

from suidex.domain.entities.pool import AggregationResult


@dataclass(frozen=True)
class CacheEntry:
    data: AggregationResult
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_fresh(self, *, now: float, ttl_seconds: float) -> bool:
        return self.timestamp > 0 and self.age(now) < ttl_seconds
