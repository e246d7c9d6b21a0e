"""
logger.py
---------

Structured logging for the catalog API.

The module exposes a single ``logger`` object used throughout the
application. Log calls take an event message plus key/value context::

    logger.info("Tool created.", tool_id=tool.id)

Output is rendered as JSON in production and as colored key/value lines
otherwise. The level is read from ``LOG_LEVEL`` (default ``INFO``).
"""

import logging
import os
import sys

import structlog


def _resolve_level():
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging():
    """
    Configure the stdlib root handler and structlog processors.

    Safe to call more than once; the last call wins.
    """
    level = _resolve_level()
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=level, force=True
    )

    if os.environ.get("FLASK_ENV") == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

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
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


configure_logging()

logger = structlog.get_logger("catalog_api")
