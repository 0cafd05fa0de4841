from __future__ import annotations


UNKNOWN_SYMBOL = "UNKNOWN"
FALLBACK_SYMBOL = "TOKEN"
GENERIC_SEGMENTS = frozenset({"COIN"})

KNOWN_COIN_TYPES = {
    "0x2::sui::SUI": "SUI",
    "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf::coin::COIN": "USDC",
    "0xc060006111016b8a020ad5b33834984a437aaa7d3c74c18e09a95d48aceab08c::coin::COIN": "USDT",
    "0xaf8cd5edc19c4512f4259f0bee101a40d41ebed738ade5874359610ef8eeced5::coin::COIN": "WETH",
    "0x027792d9fed7f9844eb4839566001bb6f6cb4804f66aa2da6fe1ee242d896881::coin::COIN": "WBTC",
}


def extract_symbol(coin_type: str | None) -> str:
    """Best-effort ticker for a Move coin type such as ``0x2::sui::SUI``."""
    if not coin_type or not coin_type.strip():
        return UNKNOWN_SYMBOL
    normalized = coin_type.strip()
    parts = [part for part in normalized.split("<", 1)[0].split("::") if part]

    candidate = parts[-1].upper() if len(parts) > 1 else ""
    if candidate in GENERIC_SEGMENTS and len(parts) >= 3:
        candidate = parts[-2].upper()
    if candidate and candidate not in GENERIC_SEGMENTS:
        return candidate

    known = KNOWN_COIN_TYPES.get(normalized)
    if known is not None:
        return known
    return FALLBACK_SYMBOL


def split_type_params(type_repr: str) -> list[str]:
    start = type_repr.find("<")
    end = type_repr.rfind(">")
    if start == -1 or end <= start:
        return []

    params: list[str] = []
    depth = 0
    current: list[str] = []
    for char in type_repr[start + 1 : end]:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "," and depth == 0:
            params.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        params.append(tail)
    return params


def extract_token_pair(type_repr: str | None) -> tuple[str, str] | None:
    if not type_repr:
        return None
    params = split_type_params(type_repr)
    if len(params) < 2:
        return None
    return extract_symbol(params[0]), extract_symbol(params[1])
