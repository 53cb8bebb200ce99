"""Tests for settings loading and logging bootstrap."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from evbus.config import BusSettings, load_settings
from evbus.domain.errors import ConfigValidationError
from evbus.logging_utils import apply_log_level, configure_logging, resolve_level
from evbus.main import build_default_bus


def test_defaults_when_environment_is_empty():
    settings = load_settings({})

    assert settings == BusSettings()
    assert settings.validate_payloads is False
    assert settings.isolate_handler_errors is False
    assert settings.log_level is None
    assert settings.log_structured is True


def test_values_read_from_mapping():
    settings = load_settings(
        {
            "EVBUS_VALIDATE_PAYLOADS": "true",
            "EVBUS_ISOLATE_HANDLER_ERRORS": "1",
            "EVBUS_LOG_LEVEL": " debug ",
            "UNRELATED": "ignored",
        }
    )

    assert settings.validate_payloads is True
    assert settings.isolate_handler_errors is True
    assert settings.log_level == "DEBUG"


def test_values_read_from_process_environment(monkeypatch):
    monkeypatch.setenv("EVBUS_VALIDATE_PAYLOADS", "yes")
    monkeypatch.delenv("EVBUS_ISOLATE_HANDLER_ERRORS", raising=False)

    settings = load_settings()

    assert settings.validate_payloads is True
    assert settings.isolate_handler_errors is False


@pytest.mark.parametrize(
    "environ",
    [
        {"EVBUS_VALIDATE_PAYLOADS": "sometimes"},
        {"EVBUS_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise(environ):
    with pytest.raises(ConfigValidationError, match="Unable to validate bus settings"):
        load_settings(environ)


def test_settings_are_frozen():
    settings = BusSettings()
    with pytest.raises(ValidationError):
        settings.validate_payloads = True  # type: ignore[misc]


def test_configure_logging_installs_single_handler():
    logger = logging.getLogger("evbus")
    try:
        configure_logging("debug")
        handler = configure_logging("info")

        installed = [h for h in logger.handlers if getattr(h, "_evbus_handler", False)]
        assert installed == [handler]
        assert logger.level == logging.INFO
        assert handler.level == logging.INFO
    finally:
        for h in list(logger.handlers):
            if getattr(h, "_evbus_handler", False):
                logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


@pytest.fixture()
def evbus_logger():
    logger = logging.getLogger("evbus")
    yield logger
    for h in list(logger.handlers):
        if getattr(h, "_evbus_handler", False):
            logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def test_structured_handler_renders_json(evbus_logger):
    handler = configure_logging("debug", structured=True)
    record = logging.LogRecord(
        "evbus.domain.bus", logging.DEBUG, __file__, 1, "Registered %s", ("x",), None
    )

    body = json.loads(handler.format(record))

    assert body["event"] == "Registered x"
    assert body["level"] == "debug"
    assert body["logger"] == "evbus.domain.bus"
    assert "timestamp" in body


def test_console_handler_renders_plain_text(evbus_logger):
    handler = configure_logging("info", structured=False)
    record = logging.LogRecord(
        "evbus.domain.bus", logging.INFO, __file__, 1, "No handlers", (), None
    )

    rendered = handler.format(record)

    assert "No handlers" in rendered
    assert not rendered.startswith("{")


@pytest.mark.parametrize("level", ["DEBUGG", "basic_format", ""])
def test_unknown_level_names_are_rejected(level, evbus_logger):
    with pytest.raises(ConfigValidationError, match="Invalid log level"):
        configure_logging(level)
    with pytest.raises(ConfigValidationError):
        apply_log_level(level)
    assert evbus_logger.level == logging.NOTSET


def test_resolve_level_is_case_insensitive():
    assert resolve_level(" warning ") == logging.WARNING
    assert resolve_level("Debug") == logging.DEBUG


def test_env_log_level_applied_to_default_bus(evbus_logger):
    bus = build_default_bus({"EVBUS_LOG_LEVEL": "DEBUG"})

    assert bus.settings.log_level == "DEBUG"
    assert evbus_logger.level == logging.DEBUG
    assert evbus_logger.getEffectiveLevel() == logging.DEBUG


def test_default_bus_leaves_logger_alone_without_env_level(evbus_logger):
    build_default_bus({})

    assert evbus_logger.level == logging.NOTSET
