"""Structured logging setup using structlog."""

import logging
import sys

import structlog

from favicon_api.core.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    In debug mode the level drops to DEBUG and records are also appended to
    ``settings.debug_log_file``.
    """
    settings = settings or get_settings()
    level_name = "DEBUG" if settings.debug_mode else settings.log_level
    level = getattr(logging, level_name)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.debug_mode:
        handlers.append(logging.FileHandler(settings.debug_log_file, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=handlers,
        force=True,
    )

    renderer: structlog.types.Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%d/%m/%Y %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
