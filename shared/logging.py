"""
Logging utilities — logger factory and setup re-exports.

Usage:
    >>> from shared.logging import get_logger
    >>> log = get_logger(__name__)
    >>> log.info("arcaptcha_verification_accepted")
"""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from shared.logging_config import configure_structlog, setup_logging


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


__all__ = [
    "get_logger",
    "configure_structlog",
    "setup_logging",
]
