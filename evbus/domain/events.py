"""Payload types for the application's named events."""

from __future__ import annotations

from typing_extensions import TypedDict


class ErrorPayload(TypedDict):
    """Payload of the ``"error"`` event."""

    err: str
    code: int


# Key -> payload type. Handlers and dispatchers for a key agree on this shape.
EVENT_PAYLOADS: dict[str, type] = {
    "error": ErrorPayload,
}
