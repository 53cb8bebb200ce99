"""Exception hierarchy for the event bus."""

from __future__ import annotations

from typing import Any, Callable, Hashable


class EventBusError(RuntimeError):
    """Base class for all event bus errors."""


class PayloadValidationError(EventBusError, ValueError):
    """Raised when a dispatched payload does not match its key's contract."""

    def __init__(self, key: Hashable, detail: str) -> None:
        self.key = key
        super().__init__(f"Invalid payload for event {key!r}: {detail}")


class HandlerDispatchError(EventBusError):
    """Raised after an isolated dispatch pass in which handlers failed.

    ``failures`` holds ``(handler, exception)`` pairs in invocation order.
    """

    def __init__(
        self,
        key: Hashable,
        failures: list[tuple[Callable[[Any], None], Exception]],
    ) -> None:
        self.key = key
        self.failures = failures
        super().__init__(
            f"{len(failures)} handler(s) failed while dispatching {key!r}"
        )


class ConfigValidationError(EventBusError):
    """Raised when bus settings cannot be validated."""
