"""Logging configuration and utilities.

Wallet notifications can carry recovery phrases and the service handles
credentials, so every structlog event passes through ``redact_sensitive``
before it is rendered.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level

from wallet_admin.core.config import Settings

REDACTED = "***"

SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "jwt_secret",
        "password",
        "password_hash",
        "phrase",
        "smtp_password",
        "token",
    }
)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return type(value)(_redact(item) for item in value)
    return value


def redact_sensitive(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask sensitive values anywhere in the event, including nested payloads."""
    return _redact(event_dict)


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    log_level = str(getattr(settings.app.log_level, "value", settings.app.log_level)).upper()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.observability.log_record_format == "json":
        processors.append(JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level)),
        processors=processors,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)


class LoggerMixin:
    """Mixin providing logger access."""

    @property
    def logger(self) -> structlog.BoundLogger:
        return get_logger(self.__class__.__module__)
