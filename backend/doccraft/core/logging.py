"""
Structured logging setup (structlog).

Development gets a colourised console renderer; every other environment
emits one JSON object per line so log shippers can index the bound keys
(instance_code, step_name, duration_ms, ...).

Usage:
    from doccraft.core.logging import get_logger, setup_logging

    setup_logging("INFO")          # once, at process start
    logger = get_logger(__name__)
    logger.info("Build started", instance_code="OFF0001")
"""

from __future__ import annotations

import logging
import sys

import structlog

from doccraft.core.config import settings


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog to share one output stream."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    renderer: structlog.types.Processor
    if settings.APP_ENV == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger tagged with the module name."""
    return structlog.get_logger(name)
