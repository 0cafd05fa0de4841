from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GetDexHistoryInput:
    days: int = 30
