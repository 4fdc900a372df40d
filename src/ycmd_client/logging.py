"""
Structured logging setup.

Modules log through ``structlog.get_logger(__name__)`` with event-style
names and key/value context. This only decides level and rendering.
"""

import logging
import sys

import structlog

from .config import config

__all__ = ["configure_logging"]


def configure_logging(level: str | None = None, json_output: bool = False) -> None:
    """Configure structlog for console output on stderr.

    Args:
        level: Log level name (default: config.log_level)
        json_output: Render JSON lines instead of the console format
    """
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
