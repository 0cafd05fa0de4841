"""Approximate TVL for pools whose on-chain state exposes only reserves.

The estimate assumes both sides of the pool hold equal value and that
reserves use 9 decimals. Stable tokens use 6 decimals on Sui, so a stable
reserve read with a 1e9 scale is lifted back by 10^(9-6). This is a rough
heuristic and must not be read as an exact valuation.
"""
from __future__ import annotations


NATIVE_SYMBOL = "SUI"
STABLE_SYMBOLS = frozenset({"USDC", "USDT", "DAI", "AUSD"})
RESERVE_SCALE = 1e9
STABLE_DECIMALS_ADJUSTMENT = 10 ** (9 - 6)


def estimate_tvl(
    *,
    reserve_a: float,
    reserve_b: float,
    symbol_a: str,
    symbol_b: str,
    native_price_usd: float,
) -> float:
    amount_a = reserve_a / RESERVE_SCALE
    amount_b = reserve_b / RESERVE_SCALE
    upper_a = symbol_a.upper()
    upper_b = symbol_b.upper()

    if NATIVE_SYMBOL in (upper_a, upper_b):
        native_amount = amount_a if upper_a == NATIVE_SYMBOL else amount_b
        return native_amount * native_price_usd * 2

    if upper_a in STABLE_SYMBOLS or upper_b in STABLE_SYMBOLS:
        stable_amount = amount_a if upper_a in STABLE_SYMBOLS else amount_b
        return stable_amount * STABLE_DECIMALS_ADJUSTMENT * 2

    return max(amount_a, amount_b) * native_price_usd * 2
