from __future__ import annotations

from typing import Any

from suidex.domain.services.normalization import is_stablecoin_name


FEE_RATE_SCALE = 1e6


def scaled_fee_rate(raw_fee_rate: float | None) -> float | None:
    """On-chain fee rates are stored in parts per million."""
    if raw_fee_rate is None:
        return None
    return raw_fee_rate / FEE_RATE_SCALE


def build_pool_payload(
    *,
    pool_id: str,
    name: str,
    dex: str,
    tvl: float | None,
    volume_24h: float | None = None,
    volume_7d: float | None = None,
    volume_30d: float | None = None,
    fees_24h: float | None = None,
    fees_7d: float | None = None,
    fees_30d: float | None = None,
    fee_rate: float | None = None,
    stablecoin: bool | None = None,
    **yields: float | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": pool_id,
        "name": name,
        "dex": dex,
        "tvl": tvl,
        "volume_24h": volume_24h,
        "volume_7d": volume_7d,
        "volume_30d": volume_30d,
        "fees_24h": fees_24h,
        "fees_7d": fees_7d,
        "fees_30d": fees_30d,
        "stablecoin": stablecoin if stablecoin is not None else is_stablecoin_name(name),
    }
    if fee_rate is not None:
        payload["feeRate"] = fee_rate
    # apr / apyBase / apyReward: absent keys fall back to 0 during normalization.
    payload.update(yields)
    return payload
