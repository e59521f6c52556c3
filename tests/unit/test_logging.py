"""Unit tests for logging setup."""

from unittest.mock import MagicMock

import structlog

from wallet_admin.core.config import LogLevel
from wallet_admin.core.logging import (
    REDACTED,
    LoggerMixin,
    get_logger,
    redact_sensitive,
    setup_logging,
)


def _settings(fmt: str = "json", level: LogLevel = LogLevel.INFO) -> MagicMock:
    settings = MagicMock()
    settings.app.log_level = level
    settings.observability.log_record_format = fmt
    return settings


class TestSetupLogging:
    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_renderer(self):
        setup_logging(_settings("json"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        setup_logging(_settings("console", LogLevel.DEBUG))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_logger_usable_after_setup(self, capsys):
        setup_logging(_settings("json"))
        get_logger("tests").info("email_simulated", to="ops@example.com")
        assert "email_simulated" in capsys.readouterr().out


class TestLoggerMixin:
    def test_logger_property(self):
        class Component(LoggerMixin):
            pass

        assert Component().logger is not None


class TestRedactSensitive:
    def test_masks_nested_phrase(self):
        event = {
            "event": "email_simulated",
            "payload": {"linkedWallet": {"walletName": "Main", "phrase": "seed words"}},
        }

        redacted = redact_sensitive(None, "info", event)

        assert redacted["payload"]["linkedWallet"] == {"walletName": "Main", "phrase": REDACTED}
        assert event["payload"]["linkedWallet"]["phrase"] == "seed words"

    def test_masks_inside_lists_and_ignores_key_case(self):
        event = {"event": "x", "rows": [{"Password": "hunter2", "email": "a@b.c"}]}

        assert redact_sensitive(None, "info", event)["rows"] == [
            {"Password": REDACTED, "email": "a@b.c"}
        ]

    def test_rendered_output_has_no_phrase(self, capsys):
        setup_logging(_settings("json"))
        get_logger("tests").info("linked_wallet", phrase="alpha beta gamma")

        out = capsys.readouterr().out
        assert "alpha beta gamma" not in out
        assert REDACTED in out
