"""Immutable request contexts that carry scheduling hints as key-value pairs."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any


class CtxKey(str):
    """Key type for scheduler values.

    A ``CtxKey`` never matches a plain string key of the same text, so values
    stored under it cannot collide with keys of other types.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"CtxKey({str.__repr__(self)})"


_NO_KEY = object()


class Context:
    """A chain of key-value pairs; each ``with_value`` returns a new child context."""

    __slots__ = ("_parent", "_key", "_value")

    def __init__(self) -> None:
        self._parent: Context | None = None
        self._key: Any = _NO_KEY
        self._value: Any = None

    def with_value(self, key: Hashable, value: Any) -> Context:
        """Return a child context in which ``key`` maps to ``value``."""
        if key is None:
            raise TypeError("context key must not be None")
        child = Context()
        child._parent = self
        child._key = key
        child._value = value
        return child

    def value(self, key: Any) -> Any:
        """Return the value bound to ``key``, or None when nothing is bound.

        Keys match only when both their type and their value are equal; the
        nearest binding wins.
        """
        ctx: Context | None = self
        while ctx is not None:
            stored = ctx._key
            if stored is not _NO_KEY and type(stored) is type(key) and stored == key:
                return ctx._value
            ctx = ctx._parent
        return None

    def __repr__(self) -> str:
        pairs = []
        ctx: Context | None = self
        while ctx is not None:
            if ctx._key is not _NO_KEY:
                pairs.append(f"{ctx._key!r}={ctx._value!r}")
            ctx = ctx._parent
        return f"Context({', '.join(reversed(pairs))})"


def context_with_map(ctx: Context, mapping: Mapping[str, Any] | None) -> Context:
    """Bind every entry of ``mapping`` into ``ctx`` under a ``CtxKey`` of its key."""
    for key, value in (mapping or {}).items():
        ctx = ctx.with_value(CtxKey(key), value)
    return ctx