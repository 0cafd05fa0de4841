from __future__ import annotations

import asyncio

import httpx
import pytest

from suidex.infrastructure.clients.bluefin_sdk_client import BluefinSpotClient
from suidex.infrastructure.clients.cetus_sdk_client import CetusSdkClient
from suidex.infrastructure.clients.fullsail_sdk_client import FullSailApiError, FullSailSdkClient
from suidex.infrastructure.fetchers.sdk_pool_fetchers import (
    BluefinSdkPoolFetcher,
    CetusSdkPoolFetcher,
    FullSailSdkPoolFetcher,
)
from suidex.infrastructure.known_pools import KnownPool


USDC = "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf::coin::COIN"


class FakePrice:
    async def get_native_price_usd(self) -> float:
        return 3.0


class FakeSui:
    def __init__(self, objects: dict):
        self._objects = objects

    async def query_object(self, address):
        value = self._objects.get(address)
        if isinstance(value, Exception):
            raise value
        return value

    async def iter_objects_by_type(self, object_type, *, page_size=50, max_pages=None):
        for value in self._objects.values():
            if isinstance(value, dict):
                yield value


def _pool_object(address: str, fields: dict) -> dict:
    return {
        "address": address,
        "asMoveObject": {
            "contents": {
                "type": {"repr": f"0x1eab::pool::Pool<0x2::sui::SUI, {USDC}>"},
                "json": fields,
            }
        },
    }


def test_cetus_sdk_fetcher_isolates_per_pool_failures():
    known = (KnownPool("0xa", "SUI/USDC"), KnownPool("0xb", "SUI/USDT"), KnownPool("0xc", "DEEP/SUI"))
    sui = FakeSui(
        {
            "0xa": _pool_object("0xa", {"coin_a": "2000000000", "coin_b": "1", "liquidity": "10", "fee_rate": "500"}),
            "0xb": RuntimeError("429 Too Many Requests"),
            "0xc": None,
        }
    )
    fetcher = CetusSdkPoolFetcher(client=CetusSdkClient(sui), price_provider=FakePrice(), known_pools=known)

    pools = asyncio.run(fetcher.fetch_pools())

    assert [pool["id"] for pool in pools] == ["0xa"]
    assert pools[0]["tvl"] == pytest.approx(2 * 3.0 * 2)
    assert pools[0]["feeRate"] == pytest.approx(0.0005)
    assert pools[0]["volume_24h"] is None
    assert pools[0]["apr"] is None


def test_cetus_sdk_client_lists_pools_by_type():
    sui = FakeSui({"0xa": _pool_object("0xa", {"coin_a": "1", "coin_b": "2"})})
    pools = asyncio.run(CetusSdkClient(sui).list_pools())
    assert pools[0]["poolAddress"] == "0xa"
    assert pools[0]["coinTypeA"] == "0x2::sui::SUI"
    assert pools[0]["coinTypeB"] == USDC


def _bluefin_client(payload, status_code: int = 200) -> BluefinSpotClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/pools/info"
        return httpx.Response(status_code, json=payload)

    return BluefinSpotClient("https://bluefin.test/api/v1", 5, transport=httpx.MockTransport(handler))


def test_bluefin_sdk_fetcher_resolves_aliases_filters_and_sorts():
    payload = {
        "pools": [
            {"poolAddress": "0x1", "name": "SUI/USDC", "totalValueLocked": "500", "dailyVolume": 50, "apy": 3},
            {"address": "0x2", "tokenA": {"info": {"symbol": "WETH"}}, "tokenB": {"info": {"symbol": "USDC"}},
             "tvl": 900, "day": {"volume": "90", "fee": "0.3", "apr": {"total": "8.5"}}, "feeRate": 500},
            {"address": "0x3", "name": "DUST/SUI", "tvl": 0},
        ]
    }
    fetcher = BluefinSdkPoolFetcher(client=_bluefin_client(payload))

    pools = asyncio.run(fetcher.fetch_pools())

    assert [pool["id"] for pool in pools] == ["0x2", "0x1"]
    assert pools[0]["name"] == "WETH/USDC"
    assert pools[0]["volume_24h"] == 90.0
    assert pools[0]["fees_24h"] == 0.3
    assert pools[0]["apr"] == 8.5
    assert pools[0]["feeRate"] == pytest.approx(0.0005)
    assert pools[1]["tvl"] == 500.0
    assert pools[1]["volume_24h"] == 50.0
    assert pools[1]["fees_24h"] is None
    assert pools[1]["apr"] == 3.0


def test_bluefin_sdk_fetcher_keeps_top_pools_only():
    payload = {"data": [{"address": f"0x{i}", "name": f"P{i}", "tvl": i + 1} for i in range(60)]}
    pools = asyncio.run(BluefinSdkPoolFetcher(client=_bluefin_client(payload)).fetch_pools())
    assert len(pools) == 50
    assert pools[0]["tvl"] == 60.0


def test_bluefin_sdk_fetcher_returns_empty_when_api_fails():
    fetcher = BluefinSdkPoolFetcher(client=_bluefin_client({"error": "down"}, status_code=502))
    assert asyncio.run(fetcher.fetch_pools()) == []


def _fullsail_client(backend: dict, sui: FakeSui) -> FullSailSdkClient:
    def handler(request: httpx.Request) -> httpx.Response:
        pool_id = request.url.path.rsplit("/", 1)[-1]
        response = backend.get(pool_id)
        if response is None:
            return httpx.Response(404)
        if isinstance(response, int):
            return httpx.Response(response)
        return httpx.Response(200, json=response)

    return FullSailSdkClient(sui, "https://fullsail.test/api", 5, transport=httpx.MockTransport(handler))


def test_fullsail_sdk_fetcher_prefers_backend_stats_and_falls_back_to_chain():
    known = (KnownPool("0xa", "SUI/USDC"), KnownPool("0xb", "WAL/SUI"), KnownPool("0xc", "IKA/SUI"))
    backend = {
        "0xa": {
            "name": "SUI/USDC",
            "fee": 1622,
            "dinamic_stats": {
                "tvl": "1200000",
                "volume_usd_24h": 300000,
                "volume_usd_7d": 2000000,
                "fees_usd_24h": 480,
                "apr": 21.5,
            },
        },
        "0xb": 500,
    }
    sui = FakeSui({"0xb": _pool_object("0xb", {"fee_rate": "3000", "liquidity": "1"}), "0xc": None})
    fetcher = FullSailSdkPoolFetcher(client=_fullsail_client(backend, sui), known_pools=known)

    pools = asyncio.run(fetcher.fetch_pools())
    by_id = {pool["id"]: pool for pool in pools}

    assert set(by_id) == {"0xa", "0xb"}
    assert by_id["0xa"]["tvl"] == 1_200_000.0
    assert by_id["0xa"]["volume_30d"] is None
    assert by_id["0xa"]["feeRate"] == pytest.approx(0.001622)
    assert by_id["0xa"]["apr"] == 21.5
    assert by_id["0xb"]["tvl"] is None
    assert by_id["0xb"]["volume_24h"] is None
    assert by_id["0xb"]["feeRate"] == pytest.approx(0.003)
    assert by_id["0xb"]["name"] == "WAL/SUI"


def test_bluefin_client_get_pool_matches_any_address_alias():
    payload = {"data": [{"poolAddress": "0xAB", "name": "SUI/USDC"}, {"id": "0xcd", "name": "WAL/SUI"}]}
    client = _bluefin_client(payload)

    assert asyncio.run(client.get_pool("0xab"))["name"] == "SUI/USDC"
    assert asyncio.run(client.get_pool("0xCD"))["name"] == "WAL/SUI"
    assert asyncio.run(client.get_pool("0xef")) is None


def _fullsail_listing_client(response: httpx.Response) -> FullSailSdkClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/pools"
        return response

    return FullSailSdkClient(FakeSui({}), "https://fullsail.test/api/", 5, transport=httpx.MockTransport(handler))


def test_fullsail_client_lists_pools_from_envelope_or_array():
    enveloped = _fullsail_listing_client(httpx.Response(200, json={"pools": [{"id": "0xa"}, "junk"]}))
    bare = _fullsail_listing_client(httpx.Response(200, json=[{"id": "0xb"}]))

    assert asyncio.run(enveloped.list_pools()) == [{"id": "0xa"}]
    assert asyncio.run(bare.list_pools()) == [{"id": "0xb"}]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"status": "ok"}),
    ],
)
def test_fullsail_client_list_pools_raises_api_error_on_bad_body(response):
    with pytest.raises(FullSailApiError):
        asyncio.run(_fullsail_listing_client(response).list_pools())


def test_fullsail_client_get_pool_unwraps_envelope_and_maps_404_to_none():
    client = _fullsail_client({"0xa": {"data": {"name": "SUI/USDC", "fee": 100}}}, FakeSui({}))

    assert asyncio.run(client.get_pool("0xa")) == {"name": "SUI/USDC", "fee": 100}
    assert asyncio.run(client.get_pool("0xmissing")) is None
