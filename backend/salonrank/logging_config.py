"""structlog setup shared by the library and the command-line tool."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .settings import settings

SERVICE_NAME = "salonrank"
SERVICE_VERSION = "0.1.0"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp every event with the engine name and version."""
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = SERVICE_VERSION
    return event_dict


def _shared_processors(timestamp_fmt: str) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=timestamp_fmt),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_structlog(json_logs: bool | None = None, level: str | None = None) -> None:
    """
    Route scoring events through structlog onto stderr.

    Args:
        json_logs: JSON lines when True, coloured console output when False.
                   None follows the DEBUG setting (JSON unless debugging).
        level: stdlib level name; falls back to LOG_LEVEL.
    """
    if json_logs is None:
        json_logs = not settings.DEBUG

    if json_logs:
        processors = _shared_processors("iso") + [
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = _shared_processors("%Y-%m-%d %H:%M:%S") + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout carries command results, so log records go to stderr
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Logger for a salonrank module.

    Usage:
        logger = get_logger(__name__)
        logger.debug("slot_ranked", candidates=12, best="14:00")
    """
    return structlog.get_logger(name)


__all__ = ["add_app_context", "configure_structlog", "get_logger"]
