from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from suidex.domain.entities.pool import PoolRecord
from suidex.domain.exceptions import PoolNormalizationError
from suidex.domain.services.field_resolution import keys, resolve_field, to_float, to_str


DEFAULT_FEE_RATE = 0.003
UNKNOWN_NAME = "Unknown"

ID_FIELDS = keys("id", "pool", "poolAddress", "address")
NAME_FIELDS = keys("name", "symbol")
DEX_FIELDS = keys("dex")
FEE_RATE_FIELDS = keys("feeRate", "fee_rate")

METRIC_FIELDS: dict[str, tuple[str, ...]] = {
    "tvl": ("tvl",),
    "volume_24h": ("volume_24h", "volume24h"),
    "volume_7d": ("volume_7d", "volume7d"),
    "volume_30d": ("volume_30d", "volume30d"),
    "fees_24h": ("fees_24h", "fees24h"),
    "fees_7d": ("fees_7d", "fees7d"),
    "fees_30d": ("fees_30d", "fees30d"),
}


def _nullable_number(
    raw: Mapping[str, Any],
    aliases: Sequence[str],
    *,
    default: float | None,
) -> float | None:
    # An alias present with None means the source reported the value as unavailable.
    for alias in aliases:
        if alias not in raw:
            continue
        value = raw[alias]
        if value is None:
            return None
        try:
            return to_float(value)
        except (TypeError, ValueError):
            return None
    return default


def is_stablecoin_name(name: str) -> bool:
    return "USD" in name.upper()


def normalize_pool(raw: Mapping[str, Any]) -> PoolRecord:
    """Project a PoolRecord-shaped mapping onto the canonical record.

    Missing volume/fee/TVL metrics become None, missing yield fields become 0
    and a missing fee rate becomes DEFAULT_FEE_RATE. Explicit None values are
    kept as None so "unknown" never turns into zero.
    """
    pool_id = resolve_field(raw, ID_FIELDS, parse=to_str)
    if pool_id is None:
        raise PoolNormalizationError("pool payload has no id.")
    dex = resolve_field(raw, DEX_FIELDS, parse=to_str)
    if dex is None:
        raise PoolNormalizationError(f"pool {pool_id} has no dex.")

    name = resolve_field(raw, NAME_FIELDS, default=UNKNOWN_NAME, parse=to_str)
    metrics = {
        field_name: _nullable_number(raw, aliases, default=None)
        for field_name, aliases in METRIC_FIELDS.items()
    }

    stablecoin = raw.get("stablecoin")
    if not isinstance(stablecoin, bool):
        stablecoin = is_stablecoin_name(name)

    return PoolRecord(
        id=pool_id,
        name=name,
        dex=dex,
        fee_rate=resolve_field(raw, FEE_RATE_FIELDS, default=DEFAULT_FEE_RATE, parse=to_float),
        apr=_nullable_number(raw, ("apr", "apy"), default=0.0),
        apy_base=_nullable_number(raw, ("apyBase", "apy_base"), default=0.0),
        apy_reward=_nullable_number(raw, ("apyReward", "apy_reward"), default=0.0),
        stablecoin=stablecoin,
        **metrics,
    )
