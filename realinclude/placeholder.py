"""
Placeholder Tokens and Resolution State.

A Placeholder stands in for a key or value that is not known when the
expected shape is written. The first time the matcher meets a registered
placeholder it binds the token to whatever it finds (subject to the token's
resolver); every later occurrence in the same call must agree with that
binding. This is a small unification table keyed by token identity:

    user = Placeholder("user")
    match_inclusion(
        {"users": {"u1": {"name": "ann"}}, "owner": "u1"},
        {"users": {user: {"name": "ann"}}, "owner": user},
        symbols={user: {}},
    )

Bindings live in the MatchContext of a single call and are never shared
between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping


# Sentinel for an unresolved slot (None is a valid binding)
class _Absent:
    """Sentinel indicating a placeholder has no value yet."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class Placeholder:
    """
    Opaque token used as an expected key or value.

    Tokens compare by identity: two Placeholder("a") instances are different
    tokens. The name is only used in failure messages.
    """

    __slots__ = ("name",)

    def __init__(self, name: str = "") -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Placeholder({self.name!r})"


Resolver = Callable[[Any, Any], Any]


def is_defined(value: Any, ctx: Any = None) -> bool:
    """Default resolver: accept anything that is present."""
    return value is not ABSENT


@dataclass
class SymbolBinding:
    """
    Resolution state for one placeholder within one call.

    Attributes:
        matcher: Resolver called as matcher(candidate, ctx); a truthy result
            accepts the candidate as the binding.
        value: The bound key or value, ABSENT until resolved.
    """

    matcher: Resolver = is_defined
    value: Any = ABSENT

    @property
    def resolved(self) -> bool:
        return self.value is not ABSENT

    def accepts(self, candidate: Any, ctx: Any) -> bool:
        return bool(self.matcher(candidate, ctx))


def normalize_symbols(symbols: Mapping[Placeholder, Any] | None) -> dict[Placeholder, SymbolBinding]:
    """
    Build fresh bindings from caller-supplied symbol descriptors.

    Each descriptor is None or a mapping with optional "matcher" and "value"
    entries. Missing entries take the defaults: the is_defined resolver and
    an unresolved slot. The caller's descriptors are copied, never written
    to.

    Args:
        symbols: Mapping from token to descriptor, already validated.

    Returns:
        Dict from token to a new SymbolBinding.
    """
    normalized: dict[Placeholder, SymbolBinding] = {}
    for token, descriptor in (symbols or {}).items():
        descriptor = descriptor or {}
        normalized[token] = SymbolBinding(
            matcher=descriptor.get("matcher") or is_defined,
            value=descriptor.get("value", ABSENT),
        )
    return normalized


def snapshot_bindings(symbols: Mapping[Placeholder, SymbolBinding]) -> dict[Placeholder, Any]:
    """Record the current value of every binding."""
    return {token: binding.value for token, binding in symbols.items()}


def restore_bindings(
    symbols: Mapping[Placeholder, SymbolBinding],
    snapshot: Mapping[Placeholder, Any],
) -> list[Placeholder]:
    """
    Undo bindings made since snapshot was taken.

    Returns:
        The tokens whose binding was rolled back.
    """
    undone = []
    for token, value in snapshot.items():
        if symbols[token].value is not value:
            symbols[token].value = value
            undone.append(token)
    return undone
