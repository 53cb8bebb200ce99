"""Logging bootstrap for applications embedding the event bus."""

from __future__ import annotations

import logging

import structlog
from pydantic import ValidationError

from evbus.config import BusSettings
from evbus.domain.errors import ConfigValidationError

PACKAGE_LOGGER = "evbus"


def resolve_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Unknown names raise ``ConfigValidationError`` instead of falling back.
    """
    try:
        name = BusSettings(log_level=level).log_level
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid log level {level!r}: {exc}") from exc
    return logging.getLevelName(name)


def apply_log_level(level: str) -> int:
    """Set the level of the ``evbus`` package logger and return it."""
    resolved = resolve_level(level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(resolved)
    return resolved


def configure_logging(
    level: str = "WARNING", structured: bool = True
) -> logging.Handler:
    """Attach a structlog-formatted stderr handler to the ``evbus`` logger.

    Records from the package's stdlib loggers go through structlog's
    ``ProcessorFormatter``: JSON lines when *structured*, the console renderer
    otherwise. The host's root logging setup is left alone. Calling this again
    replaces the handler. Returns the installed handler.
    """
    resolved = apply_log_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, "_evbus_handler", False):
            logger.removeHandler(existing)

    if structured:
        renderer = structlog.processors.JSONRenderer(
            ensure_ascii=False, separators=(",", ":")
        )
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
        ],
    )

    handler = logging.StreamHandler()
    handler.setLevel(resolved)
    handler.setFormatter(formatter)
    handler._evbus_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return handler
