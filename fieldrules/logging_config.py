"""Structured logging setup.

Call configure_logging() once at startup. Until then structlog's defaults
apply; validation results never depend on whether logging is configured.
"""

import logging
import sys
from typing import IO, Optional

import structlog

from fieldrules.config import Settings, get_settings

# File sink opened by the last configure_logging() call, closed on reconfigure
_file_sink: Optional[IO[str]] = None


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog from settings.

    Args:
        settings: Explicit settings. If None, uses get_settings().
    """
    global _file_sink
    settings = settings or get_settings()

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    previous_sink, _file_sink = _file_sink, None

    if settings.LOG_FILE:
        # External file sink, appended to across runs
        _file_sink = open(settings.LOG_FILE, "a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=_file_sink)
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    if settings.LOG_JSON:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )

    if previous_sink is not None:
        previous_sink.close()

    structlog.get_logger().debug(
        "logging_configured",
        level=settings.LOG_LEVEL,
        sink=settings.LOG_FILE or "stderr",
    )
