from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchPoolDataInput:
    force_refresh: bool = False
    mode: str | None = None


@dataclass(frozen=True)
class DataSourceInfoOutput:
    current_mode: str
    available_modes: list[str]
