from __future__ import annotations

from datetime import datetime, timezone

from fastapi.testclient import TestClient

from suidex.api.deps import get_fetch_pool_data_use_case
from suidex.application.use_cases.fetch_pool_data import FetchPoolDataUseCase
from suidex.domain.entities.pool import AggregationResult
from suidex.domain.services.normalization import normalize_pool
from suidex.domain.services.pool_stats import compute_dex_stats, compute_summary
from suidex.main import app


class FakeSource:
    def __init__(self):
        self.commands = []
        self.cleared = 0

    async def execute(self, command):
        self.commands.append(command)
        pools = [
            normalize_pool({"id": "0x1", "name": "SUI/USDC", "dex": "Cetus", "tvl": 1000, "volume_24h": None}),
        ]
        return AggregationResult(
            pools=pools,
            dex_stats=compute_dex_stats(pools),
            summary=compute_summary(pools),
            last_updated=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            mode="any",
            fetch_status={"Cetus": "success"},
        )

    def clear_cache(self):
        self.cleared += 1


def _install(configured_mode: str = "defillama"):
    sources = {"defillama": FakeSource(), "graphql": FakeSource()}
    use_case = FetchPoolDataUseCase(sources=sources, configured_mode=configured_mode)
    app.dependency_overrides[get_fetch_pool_data_use_case] = lambda: use_case
    return sources


def test_get_pools_returns_contract_shape_with_nulls():
    sources = _install()

    client = TestClient(app)
    response = client.get("/v1/pools", params={"mode": "graphql", "forceRefresh": "true"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "graphql"
    assert payload["summary"] == {"totalTVL": 1000.0, "totalVolume24h": 0.0, "totalPools": 1}
    assert payload["dexStats"]["Cetus"]["poolCount"] == 1
    assert payload["fetchStatus"] == {"Cetus": "success"}
    assert payload["pools"][0]["volume_24h"] is None
    assert payload["pools"][0]["feeRate"] == 0.003
    assert payload["pools"][0]["stablecoin"] is True
    assert sources["graphql"].commands[0].force_refresh is True

    app.dependency_overrides.clear()


def test_unknown_mode_override_falls_back_to_configured_mode():
    sources = _install()

    client = TestClient(app)
    response = client.get("/v1/pools", params={"mode": "carrier-pigeon"})

    assert response.status_code == 200
    assert response.json()["mode"] == "defillama"
    assert len(sources["defillama"].commands) == 1

    app.dependency_overrides.clear()


def test_data_source_lists_modes():
    _install("graphql")

    client = TestClient(app)
    response = client.get("/v1/data-source")

    assert response.status_code == 200
    assert response.json() == {"currentMode": "graphql", "availableModes": ["defillama", "graphql"]}

    app.dependency_overrides.clear()


def test_clear_cache_route_maps_unknown_mode_to_400():
    sources = _install()

    client = TestClient(app)
    ok = client.delete("/v1/pools/cache", params={"mode": "graphql"})
    bad = client.delete("/v1/pools/cache", params={"mode": "sdk"})

    assert ok.status_code == 200
    assert ok.json() == {"cleared": ["graphql"]}
    assert sources["graphql"].cleared == 1
    assert bad.status_code == 400

    app.dependency_overrides.clear()
