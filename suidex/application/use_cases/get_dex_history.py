from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
from typing import Any

from suidex.application.dto.dex_history import GetDexHistoryInput
from suidex.application.ports.dex_history_port import DexHistoryPort
from suidex.domain.entities.history import DexHistory, HistoricalSeries
from suidex.domain.entities.pool import Dex
from suidex.domain.exceptions import HistoryPeriodError
from suidex.domain.services.capital_efficiency import compute_efficiency, summarize_breakdown


logger = logging.getLogger(__name__)

MAX_HISTORY_DAYS = 365
TRACKED_DEXES = tuple(dex.value for dex in Dex)


class GetDexHistoryUseCase:
    """Daily volume and fee series per DEX plus capital efficiency ratios.

    Each upstream read fails independently: a missing series comes back empty
    and a missing TVL leaves the TVL-based ratios unset.
    """

    def __init__(self, *, source: DexHistoryPort, dexes: Sequence[str] = TRACKED_DEXES):
        self._source = source
        self._dexes = tuple(dexes)

    async def execute(self, command: GetDexHistoryInput) -> DexHistory:
        if command.days < 1 or command.days > MAX_HISTORY_DAYS:
            raise HistoryPeriodError(f"days must be between 1 and {MAX_HISTORY_DAYS}.")

        volume_raw, fees_raw, *tvl_raw = await asyncio.gather(
            self._source.get_volume_breakdown(),
            self._source.get_fee_breakdown(),
            *(self._source.get_dex_tvl(dex) for dex in self._dexes),
            return_exceptions=True,
        )

        volume = self._series("volume", volume_raw, command.days)
        fees = self._series("fees", fees_raw, command.days)
        efficiency = {}
        for dex, tvl in zip(self._dexes, tvl_raw):
            tvl = self._value("tvl", dex, tvl)
            efficiency[dex] = compute_efficiency(
                dex,
                fees=fees.totals.get(dex),
                volume=volume.totals.get(dex),
                tvl=tvl,
                days=command.days,
            )

        return DexHistory(period=command.days, volume=volume, fees=fees, efficiency=efficiency)

    def _series(self, metric: str, outcome: Any, days: int) -> HistoricalSeries:
        _reraise_fatal(outcome)
        if isinstance(outcome, Exception):
            logger.warning("get_dex_history: series_failed metric=%s error=%s", metric, outcome)
            return HistoricalSeries()
        return summarize_breakdown(outcome, days)

    def _value(self, metric: str, dex: str, outcome: Any) -> float | None:
        _reraise_fatal(outcome)
        if isinstance(outcome, Exception):
            logger.warning("get_dex_history: lookup_failed metric=%s dex=%s error=%s", metric, dex, outcome)
            return None
        return outcome


def _reraise_fatal(outcome: Any) -> None:
    if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
        raise outcome
