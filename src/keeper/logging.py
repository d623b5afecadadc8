"""Structured logging for Keeper.

Keeper only emits events through :func:`get_logger`. Applications call
:func:`setup_logging` once at startup, before opening sessions::

    setup_logging()
    await init_db()
"""

import logging
import sys
from typing import Any

import structlog

from keeper.config import settings


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        fmt: ``"console"`` or ``"json"``, defaults to ``settings.log_format``
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    log_format = fmt or settings.log_format

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        renderer: list[Any] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    # Statement logging follows DATABASE_ECHO only
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to ``name``."""
    return structlog.get_logger(name)
