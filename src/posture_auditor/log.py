"""Structured logging setup."""

import logging
import sys

import structlog

from posture_auditor.exceptions import ConfigurationError


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # sys.stderr is looked up per logger so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "WARNING") -> None:
    """Route structlog events to stderr, filtered by ``level``.

    Raises:
        ConfigurationError: If ``level`` is not a logging level name
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
