"""Tests for structured logging setup and engine events."""
from __future__ import annotations

import logging

import pytest
import structlog
from conftest import Person
from structlog.testing import capture_logs

from fluentrules.logging import (
    LoggerRegistry,
    bind_context,
    clear_context,
    configure_logging,
    get_shared_processors,
)
from fluentrules.errors import ConfigurationError
from fluentrules.validation import CascadeMode, InlineValidator


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_single_root_handler(self, reset_logging) -> None:
        configure_logging(level="DEBUG", json_logs=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self, reset_logging) -> None:
        configure_logging(level="chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_shared_processors_merge_context(self) -> None:
        assert structlog.contextvars.merge_contextvars in get_shared_processors()


class TestLoggerRegistry:
    """Tests for domain loggers."""

    def test_loggers_are_reused(self) -> None:
        assert LoggerRegistry.get("rules") is LoggerRegistry.get("rules")


class TestEngineEvents:
    """Tests for events emitted during validation."""

    def test_cascade_and_dependent_events(self) -> None:
        v = InlineValidator()
        v.rule_for("name").cascade(CascadeMode.STOP).not_empty().length(2).dependent_rules(
            lambda: v.rule_for("age").greater_than(0)
        )
        with capture_logs() as logs:
            v.validate(Person(name=""))
        events = [entry["event"] for entry in logs]
        assert events == ["validation_started", "cascade_stopped", "dependent_rules_skipped", "validation_completed"]
        completed = logs[-1]
        assert completed["valid"] is False
        assert completed["failures"] == 1

    def test_component_skipped_event(self) -> None:
        v = InlineValidator(lambda v: v.rule_for("name").not_empty().when(lambda p: False))
        with capture_logs() as logs:
            v.validate(Person(name=""))
        skipped = [entry for entry in logs if entry["event"] == "component_skipped"]
        assert skipped[0]["property"] == "name"
        assert skipped[0]["validator"] == "NotEmptyValidator"

    def test_bind_and_clear_context(self) -> None:
        bind_context(request_id="r-1")
        try:
            assert structlog.contextvars.get_contextvars()["request_id"] == "r-1"
        finally:
            clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_configuration_error_event(self) -> None:
        with capture_logs() as logs:
            with pytest.raises(ConfigurationError):
                InlineValidator().rule_for("name").set_validator(None)
        events = [entry for entry in logs if entry["event"] == "configuration_error"]
        assert len(events) == 1
        assert events[0]["code"] == "E7000_CONFIGURATION_GENERIC"
        assert events[0]["property"] == "name"
        assert events[0]["log_level"] == "warning"
