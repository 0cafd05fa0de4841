from __future__ import annotations

import asyncio
import threading

from suidex.application.dto.fetch_pool_data import FetchPoolDataInput
from suidex.application.use_cases.aggregate_pools import AggregatePoolsUseCase
from suidex.infrastructure.cache.memory_cache import InMemoryAggregationCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeFetcher:
    def __init__(self, dex: str, pools=None, error: Exception | None = None):
        self.dex = dex
        self._pools = pools or []
        self._error = error
        self.calls = 0

    async def fetch_pools(self):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return [dict(pool) for pool in self._pools]


def _make_use_case(fetchers, *, empty_is_failure: bool = False, clock=None, cache=None, mode="graphql"):
    return AggregatePoolsUseCase(
        mode=mode,
        fetchers=fetchers,
        cache=cache or InMemoryAggregationCache(),
        ttl_seconds=300,
        empty_is_failure=empty_is_failure,
        clock=clock or FakeClock(),
    )


def test_three_fetchers_sum_into_summary():
    use_case = _make_use_case(
        [
            FakeFetcher("Cetus", [{"id": "a", "dex": "Cetus", "tvl": 1_000_000}]),
            FakeFetcher("Bluefin", [{"id": "b", "dex": "Bluefin", "tvl": 800_000}]),
            FakeFetcher("Full Sail", [{"id": "c", "dex": "Full Sail", "tvl": 500_000}]),
        ]
    )

    result = asyncio.run(use_case.execute(FetchPoolDataInput()))

    assert result.summary.total_tvl == 2_300_000
    assert result.summary.total_pools == 3
    assert result.fetch_status == {"Cetus": "success", "Bluefin": "success", "Full Sail": "success"}
    assert result.mode == "graphql"


def test_one_failing_fetcher_does_not_hide_the_others():
    use_case = _make_use_case(
        [
            FakeFetcher("Cetus", [{"id": "a", "tvl": 10}]),
            FakeFetcher("Bluefin", error=RuntimeError("boom")),
            FakeFetcher("Full Sail", [{"id": "c", "tvl": 5}]),
        ]
    )

    result = asyncio.run(use_case.execute())

    assert result.fetch_status["Bluefin"] == "failed"
    assert result.fetch_status["Cetus"] == "success"
    assert {pool.id for pool in result.pools} == {"a", "c"}
    assert "Bluefin" not in result.dex_stats
    assert result.summary.total_tvl == 15


def test_empty_result_is_failure_only_when_configured():
    fetchers = [FakeFetcher("Cetus", [{"id": "a", "tvl": 1}]), FakeFetcher("Full Sail", [])]

    sdk_result = asyncio.run(_make_use_case(fetchers, empty_is_failure=True, mode="sdk").execute())
    graphql_result = asyncio.run(_make_use_case(fetchers, empty_is_failure=False).execute())

    assert sdk_result.fetch_status["Full Sail"] == "failed"
    assert graphql_result.fetch_status["Full Sail"] == "success"


def test_total_failure_returns_empty_well_formed_result():
    use_case = _make_use_case(
        [FakeFetcher("Cetus", error=ValueError("x")), FakeFetcher("Bluefin", error=OSError("y"))]
    )

    result = asyncio.run(use_case.execute())

    assert result.pools == []
    assert result.dex_stats == {}
    assert result.summary.total_pools == 0
    assert result.summary.total_tvl == 0
    assert set(result.fetch_status.values()) == {"failed"}


def test_fresh_cache_is_served_without_fetching():
    clock = FakeClock()
    fetcher = FakeFetcher("Cetus", [{"id": "a", "tvl": 1}])
    use_case = _make_use_case([fetcher], clock=clock)

    first = asyncio.run(use_case.execute())
    clock.now += 299
    second = asyncio.run(use_case.execute())

    assert fetcher.calls == 1
    assert second == first


def test_stale_cache_triggers_refetch():
    clock = FakeClock()
    fetcher = FakeFetcher("Cetus", [{"id": "a", "tvl": 1}])
    use_case = _make_use_case([fetcher], clock=clock)

    asyncio.run(use_case.execute())
    clock.now += 300
    asyncio.run(use_case.execute())

    assert fetcher.calls == 2


def test_force_refresh_bypasses_fresh_cache():
    fetcher = FakeFetcher("Cetus", [{"id": "a", "tvl": 1}])
    use_case = _make_use_case([fetcher])

    asyncio.run(use_case.execute())
    asyncio.run(use_case.execute(FetchPoolDataInput(force_refresh=True)))

    assert fetcher.calls == 2


def test_empty_result_is_cached_too():
    cache = InMemoryAggregationCache()
    use_case = _make_use_case([FakeFetcher("Cetus", error=RuntimeError("down"))], cache=cache)

    result = asyncio.run(use_case.execute())

    entry = cache.get("graphql")
    assert entry is not None
    assert entry.data is result
    assert entry.timestamp == 1_700_000_000.0


def test_clear_cache_forces_next_call_to_fetch():
    fetcher = FakeFetcher("Cetus", [{"id": "a", "tvl": 1}])
    use_case = _make_use_case([fetcher])

    asyncio.run(use_case.execute())
    use_case.clear_cache()
    asyncio.run(use_case.execute())

    assert fetcher.calls == 2


def test_malformed_pool_is_dropped_and_unknown_metrics_stay_null():
    use_case = _make_use_case(
        [
            FakeFetcher(
                "Cetus",
                [
                    {"name": "no id"},
                    {"id": "a", "tvl": 10, "volume_24h": None},
                ],
            )
        ]
    )

    result = asyncio.run(use_case.execute())

    assert [pool.id for pool in result.pools] == ["a"]
    assert result.pools[0].dex == "Cetus"
    assert result.pools[0].volume_24h is None
    assert result.dex_stats["Cetus"].volume_24h == 0


def test_modes_keep_separate_cache_slots():
    cache = InMemoryAggregationCache()
    graphql = _make_use_case([FakeFetcher("Cetus", [{"id": "g", "tvl": 1}])], cache=cache, mode="graphql")
    sdk = _make_use_case([FakeFetcher("Cetus", [{"id": "s", "tvl": 2}])], cache=cache, mode="sdk")

    asyncio.run(graphql.execute())
    asyncio.run(sdk.execute())

    assert cache.get("graphql").data.pools[0].id == "g"
    assert cache.get("sdk").data.pools[0].id == "s"


class GatedFetcher:
    def __init__(self, dex: str, started: list[str], all_started: asyncio.Event, expected: int, error=None):
        self.dex = dex
        self._started = started
        self._all_started = all_started
        self._expected = expected
        self._error = error
        self.finished = False

    async def fetch_pools(self):
        self._started.append(self.dex)
        if len(self._started) == self._expected:
            self._all_started.set()
        await asyncio.wait_for(self._all_started.wait(), timeout=1.0)
        if self._error is not None:
            raise self._error
        await asyncio.sleep(0)
        self.finished = True
        return [{"id": f"{self.dex}-1", "tvl": 1}]


def test_fetchers_run_concurrently_and_a_rejection_does_not_cancel_siblings():
    async def run():
        started: list[str] = []
        all_started = asyncio.Event()
        fetchers = [
            GatedFetcher("Cetus", started, all_started, 3),
            GatedFetcher("Bluefin", started, all_started, 3, error=RuntimeError("rejected")),
            GatedFetcher("Full Sail", started, all_started, 3),
        ]
        result = await _make_use_case(fetchers).execute()
        return fetchers, result

    fetchers, result = asyncio.run(run())

    assert result.fetch_status == {"Cetus": "success", "Bluefin": "failed", "Full Sail": "success"}
    assert fetchers[0].finished and fetchers[2].finished
    assert {pool.id for pool in result.pools} == {"Cetus-1", "Full Sail-1"}


class ThreadRecordingCache(InMemoryAggregationCache):
    def __init__(self):
        super().__init__()
        self.threads: list[int] = []

    def get(self, key):
        self.threads.append(threading.get_ident())
        return super().get(key)

    def set(self, key, entry):
        self.threads.append(threading.get_ident())
        super().set(key, entry)


def test_cache_calls_run_off_the_event_loop_thread():
    cache = ThreadRecordingCache()
    use_case = _make_use_case([FakeFetcher("Cetus", [{"id": "a", "tvl": 1}])], cache=cache)

    asyncio.run(use_case.execute())

    assert len(cache.threads) == 2
    assert threading.get_ident() not in cache.threads
