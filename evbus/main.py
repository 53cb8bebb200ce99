"""Process-wide default event bus."""

from __future__ import annotations

from typing import Mapping

from evbus.config import load_settings
from evbus.domain.bus import EventBus
from evbus.domain.events import EVENT_PAYLOADS
from evbus.logging_utils import apply_log_level


def build_default_bus(environ: Mapping[str, str] | None = None) -> EventBus:
    """Build a bus with the application event contract and ``EVBUS_*`` settings.

    ``EVBUS_LOG_LEVEL``, when set, is applied to the ``evbus`` logger. Output
    handlers are only installed by ``configure_logging``.
    """
    settings = load_settings(environ)
    if settings.log_level is not None:
        apply_log_level(settings.log_level)
    return EventBus(contract=EVENT_PAYLOADS, settings=settings)


# ── Singleton (created at import time for convenience) ────────────────
# Libraries that want isolation should construct their own EventBus.
bus = build_default_bus()
settings = bus.settings
