"""
Logging setup for the rental-pricing CLI and host applications.

The library itself never configures logging; hosts call ``setup_logging``
once at startup. Events go to stderr through the stdlib root handler so
command output on stdout stays clean.
"""

import logging
import sys

import structlog

DEFAULT_LOG_LEVEL = "info"


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Route structlog events through stdlib logging at ``level``.

    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_resolve_level(level),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
