from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from suidex.domain.entities.pool import (
    FETCH_FAILED,
    FETCH_SUCCESS,
    AggregationResult,
    DexStats,
    PoolRecord,
    PoolSummary,
)
from suidex.domain.exceptions import PoolNormalizationError, SnapshotFormatError
from suidex.domain.services.normalization import normalize_pool


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value:
        raise SnapshotFormatError("lastUpdated must be an ISO-8601 string.")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SnapshotFormatError(f"lastUpdated is not ISO-8601: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def map_pool_to_payload(pool: PoolRecord) -> dict[str, Any]:
    return {
        "id": pool.id,
        "name": pool.name,
        "dex": pool.dex,
        "tvl": pool.tvl,
        "volume_24h": pool.volume_24h,
        "volume_7d": pool.volume_7d,
        "volume_30d": pool.volume_30d,
        "fees_24h": pool.fees_24h,
        "fees_7d": pool.fees_7d,
        "fees_30d": pool.fees_30d,
        "feeRate": pool.fee_rate,
        "apr": pool.apr,
        "apyBase": pool.apy_base,
        "apyReward": pool.apy_reward,
        "stablecoin": pool.stablecoin,
    }


def map_result_to_payload(result: AggregationResult) -> dict[str, Any]:
    return {
        "lastUpdated": format_timestamp(result.last_updated),
        "mode": result.mode,
        "summary": {
            "totalTVL": result.summary.total_tvl,
            "totalVolume24h": result.summary.total_volume_24h,
            "totalPools": result.summary.total_pools,
        },
        "dexStats": {
            dex: {
                "poolCount": stats.pool_count,
                "totalTVL": stats.total_tvl,
                "volume24h": stats.volume_24h,
                "fees24h": stats.fees_24h,
            }
            for dex, stats in result.dex_stats.items()
        },
        "fetchStatus": dict(result.fetch_status),
        "pools": [map_pool_to_payload(pool) for pool in result.pools],
    }


def map_payload_to_pools(payload: Mapping[str, Any]) -> list[PoolRecord]:
    raw_pools = payload.get("pools")
    if not isinstance(raw_pools, list):
        raise SnapshotFormatError("pools must be a list.")
    try:
        return [normalize_pool(raw) for raw in raw_pools]
    except (PoolNormalizationError, AttributeError, TypeError) as exc:
        raise SnapshotFormatError(f"invalid pool entry: {exc}") from exc


def _map_dex_stats(raw: Mapping[str, Any]) -> DexStats:
    return DexStats(
        pool_count=int(raw["poolCount"]),
        total_tvl=float(raw["totalTVL"]),
        volume_24h=float(raw["volume24h"]),
        fees_24h=float(raw["fees24h"]),
    )


def map_payload_to_result(payload: Any) -> AggregationResult:
    if not isinstance(payload, Mapping):
        raise SnapshotFormatError("payload must be a JSON object.")
    pools = map_payload_to_pools(payload)
    try:
        summary_raw = payload["summary"]
        summary = PoolSummary(
            total_tvl=float(summary_raw["totalTVL"]),
            total_volume_24h=float(summary_raw["totalVolume24h"]),
            total_pools=int(summary_raw["totalPools"]),
        )
        dex_stats = {str(dex): _map_dex_stats(raw) for dex, raw in payload["dexStats"].items()}
        fetch_status = {
            str(dex): FETCH_SUCCESS if status == FETCH_SUCCESS else FETCH_FAILED
            for dex, status in (payload.get("fetchStatus") or {}).items()
        }
        mode = str(payload["mode"])
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SnapshotFormatError(f"invalid aggregation payload: {exc}") from exc

    return AggregationResult(
        pools=pools,
        dex_stats=dex_stats,
        summary=summary,
        last_updated=parse_timestamp(payload.get("lastUpdated")),
        mode=mode,
        fetch_status=fetch_status,
    )
