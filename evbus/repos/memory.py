"""In-memory store mapping event keys to their handlers."""

from __future__ import annotations

import types
from typing import Any, Callable, Hashable

Handler = Callable[[Any], None]


def handler_identity(handler: Handler) -> tuple[Any, ...]:
    """Return the identity token used to tell handlers apart.

    Plain callables are compared by ``id``. Bound methods (including builtin
    ones such as ``some_list.append``) are rebuilt on every attribute access,
    so they are identified by the ``id`` of their ``__self__`` object plus the
    underlying function instead.
    """
    if isinstance(handler, types.MethodType):
        return (id(handler.__self__), id(handler.__func__))
    if isinstance(handler, types.BuiltinMethodType) and handler.__self__ is not None:
        return (id(handler.__self__), handler.__name__)
    return (id(handler),)


class HandlerRepository:
    """Dict-backed store of handlers, keyed by event key.

    Each key maps to an insertion-ordered dict of identity token -> handler,
    which keeps registration order and rejects duplicates. A key never maps
    to an empty collection.
    """

    def __init__(self) -> None:
        self._store: dict[Hashable, dict[tuple[Any, ...], Handler]] = {}

    def add(self, key: Hashable, handler: Handler) -> bool:
        """Add *handler* under *key*. Returns False if it was already there."""
        handlers = self._store.get(key)
        if handlers is None:
            handlers = {}
            self._store[key] = handlers
        token = handler_identity(handler)
        if token in handlers:
            return False
        handlers[token] = handler
        return True

    def remove(self, key: Hashable, handler: Handler) -> bool:
        """Remove *handler* from *key*. Returns False if it was not registered."""
        handlers = self._store.get(key)
        if handlers is None:
            return False
        removed = handlers.pop(handler_identity(handler), None) is not None
        if not handlers:
            del self._store[key]
        return removed

    def delete(self, key: Hashable) -> bool:
        return self._store.pop(key, None) is not None

    def get(self, key: Hashable) -> tuple[Handler, ...]:
        handlers = self._store.get(key)
        if handlers is None:
            return ()
        return tuple(handlers.values())

    def has(self, key: Hashable) -> bool:
        return key in self._store

    def list_keys(self) -> list[Hashable]:
        return list(self._store)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
