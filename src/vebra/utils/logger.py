"""
Logging Configuration

structlog setup shared by the API client and the branch/property records.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Tag every entry with the environment and datafeed it belongs to.
    """
    event_dict["environment"] = settings.environment
    if settings.vebra_datafeed_id:
        event_dict.setdefault("datafeed_id", settings.vebra_datafeed_id)
    return event_dict


def _resolve_level(level: Optional[str]) -> int:
    if level:
        return getattr(logging, level.upper())
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level.upper())


def setup_logging(level: Optional[str] = None) -> structlog.BoundLogger:
    """
    Configure structured logging for the application.

    Args:
        level: Override for settings.log_level (e.g. "DEBUG")

    Returns:
        Configured structlog logger instance
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_resolve_level(level),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("vebra")


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger for a module (typically called with __name__).
    """
    return structlog.get_logger(name or "vebra")
