"""
Centralized logging configuration.

This module sets up structured logging with:
- JSON formatting for production, pretty console for development
- Redaction of credentials and challenge tokens
- Sentry integration for error tracking (ERROR+ logs become events)
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from config import LoggingSettings, SentrySettings

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "challenge_id",
    "api_key",
    "Authorization",
    "Cookie",
    "secret",
    "secret_key",
    "site_key",
}

_SENSITIVE_FRAGMENTS = ("password", "token", "secret", "key")

# Keys structlog itself owns; never redacted
_RESERVED_KEYS = {"level", "event", "timestamp", "logger"}


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _RESERVED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog with appropriate processors for the environment.

    json: one JSON document per line
    console: pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_logging(
    settings: Optional[LoggingSettings] = None,
    sentry: Optional[SentrySettings] = None,
) -> None:
    """
    Initialize logging for the application.

    Should be called once, early in application startup (create_app()).
    """
    if settings is None:
        settings = LoggingSettings()

    configure_stdlib_logging(settings.log_level)
    configure_structlog(settings.log_format)

    logger = structlog.get_logger(__name__)
    logger.info(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=settings.log_format,
        sentry_enabled=bool(sentry and sentry.sentry_dsn),
    )
