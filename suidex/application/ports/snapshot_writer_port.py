from __future__ import annotations

from typing import Protocol

from suidex.domain.entities.pool import AggregationResult


class SnapshotWriterPort(Protocol):
    def write(self, result: AggregationResult) -> str:
        ...
