"""Settings for event bus behavior, loaded from the environment."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from evbus.domain.errors import ConfigValidationError

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "EVBUS_"
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class BusSettings(BaseModel):
    """Dispatch policy switches for an ``EventBus``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    validate_payloads: bool = False
    isolate_handler_errors: bool = False
    # None leaves the "evbus" logger level untouched.
    log_level: str | None = None
    log_structured: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("Expected a string value.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(sorted(VALID_LOG_LEVELS))}."
            )
        return normalized


def load_settings(environ: Mapping[str, str] | None = None) -> BusSettings:
    """Build ``BusSettings`` from ``EVBUS_*`` variables.

    Unset variables fall back to the field defaults. Boolean values use
    pydantic's parsing ("1", "true", "yes", "on", ...).
    """
    source = os.environ if environ is None else environ
    raw: dict[str, str] = {}
    for field_name in BusSettings.model_fields:
        value = source.get(ENV_PREFIX + field_name.upper())
        if value is not None:
            raw[field_name] = value
    try:
        settings = BusSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(f"Unable to validate bus settings: {exc}") from exc
    LOGGER.debug("Loaded bus settings: %s", settings)
    return settings
