from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExportSnapshotInput:
    mode: str | None = None


@dataclass(frozen=True)
class ExportSnapshotOutput:
    location: str
    mode: str
    total_pools: int
    fetch_status: dict[str, str]
