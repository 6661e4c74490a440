"""
utils/logging.py — structlog configuration for the maintenance CLI.

JSON or console rendering is chosen from settings.log_format. The CLI calls
configure_logging() once before running a command.

Usage:
    from bestof_pipeline.utils.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger("bestof_pipeline.pipelines.cleanup", category="fitness")
    log.info("slug_fixed", old="@keepfit", new="keepfit")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from bestof_shared.config import settings


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for the CLI process.

    Args:
        log_level:  Override settings.log_level ("DEBUG", "INFO", ...).
        log_format: Override settings.log_format ("json" | "console").
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    fmt = log_format or settings.log_format

    # Logs go to stderr so command output on stdout stays clean
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """Return a structlog logger, optionally bound to initial context values."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger  # type: ignore[return-value]
