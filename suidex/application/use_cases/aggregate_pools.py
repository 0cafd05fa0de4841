from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
import logging
import time
from typing import Any

from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.application.ports.aggregation_cache_port import AggregationCachePort
from suidex.application.ports.pool_fetcher_port import PoolFetcherPort
from suidex.domain.entities.cache import CacheEntry
from suidex.domain.entities.pool import (
    FETCH_FAILED,
    FETCH_SUCCESS,
    AggregationResult,
    FetchOutcome,
    PoolRecord,
)
from suidex.domain.exceptions import PoolNormalizationError
from suidex.domain.services.normalization import normalize_pool
from suidex.domain.services.pool_stats import compute_dex_stats, compute_summary


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class AggregatePoolsUseCase:
    """Fan out to every per-DEX fetcher of one mode and cache the merged result.

    One failing fetcher never prevents the others from contributing. With
    ``empty_is_failure`` an empty list is reported as ``failed``; vendor SDK
    surfaces return nothing only when they could not reach the exchange.

    Cache reads and writes run in a worker thread; the persisted cache adapter
    makes blocking database calls.
    """

    def __init__(
        self,
        *,
        mode: str,
        fetchers: Sequence[PoolFetcherPort],
        cache: AggregationCachePort,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        empty_is_failure: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self._mode = mode
        self._fetchers = list(fetchers)
        self._cache = cache
        self._ttl_seconds = ttl_seconds
        self._empty_is_failure = empty_is_failure
        self._clock = clock

    @property
    def mode(self) -> str:
        return self._mode

    async def execute(self, command: FetchPoolDataInput | None = None) -> AggregationResult:
        command = command or FetchPoolDataInput()
        if not command.force_refresh:
            cached = await asyncio.to_thread(self._cache.get, self._mode)
            if cached is not None and cached.is_fresh(now=self._clock(), ttl_seconds=self._ttl_seconds):
                logger.info(
                    "aggregate_pools: cache_hit mode=%s age=%.1fs",
                    self._mode,
                    cached.age(self._clock()),
                )
                return cached.data.with_mode(self._mode)

        outcomes = await asyncio.gather(
            *(fetcher.fetch_pools() for fetcher in self._fetchers),
            return_exceptions=True,
        )

        fetch_status: dict[str, FetchOutcome] = {}
        pools: list[PoolRecord] = []
        for fetcher, outcome in zip(self._fetchers, outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                logger.warning(
                    "aggregate_pools: fetcher_failed mode=%s dex=%s error=%s",
                    self._mode,
                    fetcher.dex,
                    outcome,
                )
                fetch_status[fetcher.dex] = FETCH_FAILED
                continue
            if not isinstance(outcome, list):
                logger.warning(
                    "aggregate_pools: fetcher_bad_payload mode=%s dex=%s type=%s",
                    self._mode,
                    fetcher.dex,
                    type(outcome).__name__,
                )
                fetch_status[fetcher.dex] = FETCH_FAILED
                continue
            if not outcome and self._empty_is_failure:
                fetch_status[fetcher.dex] = FETCH_FAILED
                continue
            fetch_status[fetcher.dex] = FETCH_SUCCESS
            pools.extend(self._normalize_all(fetcher.dex, outcome))

        completed_at = self._clock()
        result = AggregationResult(
            pools=pools,
            dex_stats=compute_dex_stats(pools),
            summary=compute_summary(pools),
            last_updated=datetime.fromtimestamp(completed_at, tz=timezone.utc),
            mode=self._mode,
            fetch_status=fetch_status,
        )
        await asyncio.to_thread(self._cache.set, self._mode, CacheEntry(data=result, timestamp=completed_at))
        logger.info(
            "aggregate_pools: refreshed mode=%s pools=%s fetch_status=%s",
            self._mode,
            len(pools),
            fetch_status,
        )
        return result

    def clear_cache(self) -> None:
        self._cache.invalidate(self._mode)

    def _normalize_all(self, dex: str, raw_pools: list[Any]) -> list[PoolRecord]:
        records: list[PoolRecord] = []
        for raw in raw_pools:
            if not isinstance(raw, dict):
                logger.warning("aggregate_pools: dropped_pool dex=%s reason=not_a_mapping", dex)
                continue
            try:
                records.append(normalize_pool({"dex": dex, **raw}))
            except PoolNormalizationError as exc:
                logger.warning("aggregate_pools: dropped_pool dex=%s reason=%s", dex, exc)
        return records
