"""Ordered alias resolution for loosely-typed upstream payloads.

Upstream APIs expose the same logical value under different keys depending
on version and vendor. Each logical field is described by a tuple of
accessors evaluated in priority order; the first accessor yielding a usable
value wins and the typed default applies only when every accessor misses.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any


Accessor = Callable[[Mapping[str, Any]], Any]


def key(name: str) -> Accessor:
    def _get(raw: Mapping[str, Any]) -> Any:
        return raw.get(name)

    _get.__name__ = f"key[{name}]"
    return _get


def path(*names: str) -> Accessor:
    def _get(raw: Mapping[str, Any]) -> Any:
        current: Any = raw
        for name in names:
            if not isinstance(current, Mapping):
                return None
            current = current.get(name)
        return current

    _get.__name__ = f"path[{'.'.join(names)}]"
    return _get


def keys(*names: str) -> tuple[Accessor, ...]:
    return tuple(key(name) for name in names)


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a numeric metric")
    return float(value)


def to_str(value: Any) -> str:
    text = str(value).strip()
    if not text:
        raise ValueError("empty string")
    return text


def resolve_field(
    raw: Mapping[str, Any],
    accessors: Sequence[Accessor],
    *,
    default: Any = None,
    parse: Callable[[Any], Any] | None = None,
) -> Any:
    for accessor in accessors:
        value = accessor(raw)
        if value is None or value == "":
            continue
        if parse is None:
            return value
        try:
            return parse(value)
        except (TypeError, ValueError, ArithmeticError):
            continue
    return default
