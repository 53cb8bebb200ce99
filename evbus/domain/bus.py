"""Simple synchronous in-process event bus."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Mapping

from evbus.config import BusSettings
from evbus.domain.contract import PayloadContract
from evbus.domain.errors import HandlerDispatchError
from evbus.repos.memory import Handler, HandlerRepository

LOGGER = logging.getLogger(__name__)


class EventBus:
    """Publish/subscribe registry keyed by event name.

    Handlers are called synchronously, on the caller's stack, in registration
    order. Each dispatch works on a snapshot of the handlers taken when it
    starts: handlers added during the pass are first called on the next
    dispatch, and handlers removed during the pass still run in this one.

    By default a failing handler aborts the pass and its exception reaches
    the caller. With ``isolate_handler_errors`` every handler runs and the
    failures are raised together as ``HandlerDispatchError``.
    """

    def __init__(
        self,
        contract: PayloadContract | Mapping[Hashable, Any] | None = None,
        settings: BusSettings | None = None,
    ) -> None:
        if not isinstance(contract, PayloadContract):
            contract = PayloadContract(contract)
        self.contract = contract
        self.settings = settings or BusSettings()
        self._handlers = HandlerRepository()

    def register(self, key: Hashable, handler: Handler) -> None:
        """Add *handler* for *key*; registering the same handler twice is a no-op."""
        if not callable(handler):
            raise TypeError(f"Handler for {key!r} must be callable, got {handler!r}")
        if self._handlers.add(key, handler):
            LOGGER.debug("Registered handler %r for event %r", handler, key)

    def deregister(self, key: Hashable, handler: Handler | None = None) -> None:
        """Remove *handler* from *key*, or every handler for *key* if omitted."""
        if handler is None:
            if self._handlers.delete(key):
                LOGGER.debug("Deregistered all handlers for event %r", key)
        elif self._handlers.remove(key, handler):
            LOGGER.debug("Deregistered handler %r for event %r", handler, key)

    def dispatch(self, key: Hashable, payload: Any) -> None:
        """Call every handler registered for *key* with *payload*."""
        if self.settings.validate_payloads:
            self.contract.validate(key, payload)

        handlers = self._handlers.get(key)
        if not handlers:
            LOGGER.debug("No handlers for event %r", key)
            return

        if not self.settings.isolate_handler_errors:
            for handler in handlers:
                handler(payload)
            return

        failures: list[tuple[Handler, Exception]] = []
        for handler in handlers:
            try:
                handler(payload)
            except Exception as exc:
                LOGGER.exception("Handler %r failed for event %r", handler, key)
                failures.append((handler, exc))
        if failures:
            raise HandlerDispatchError(key, failures)

    # Emitter-style aliases.
    on = register
    off = deregister
    emit = dispatch

    def handlers(self, key: Hashable) -> tuple[Handler, ...]:
        return self._handlers.get(key)

    def keys(self) -> list[Hashable]:
        return self._handlers.list_keys()

    def clear(self) -> None:
        self._handlers.clear()

    def __contains__(self, key: object) -> bool:
        return self._handlers.has(key)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._handlers)
