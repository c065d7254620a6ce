"""
Structured logging configuration using structlog.

Request-scoped fields (request_id, user_id) live in structlog's contextvars, so
every log line of a request carries them without passing loggers around.

In development the output is a colored console; elsewhere, or when LOG_FORMAT
is "json", one JSON object per line.
"""

import logging
import sys
from enum import Enum
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

from catalog.config import settings


def render_enums(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Log enum members (statuses, roles, kinds) by their value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging() -> None:
    """Install the structlog processor chain and route it through stdlib logging."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_enums,
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.ENVIRONMENT == "development" and settings.LOG_FORMAT != "json":
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    for noisy in ("sqlalchemy.engine", "aiosqlite", "aiomysql"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with the given name.

    Events are snake_case names with keyword fields:
        logger = get_logger(__name__)
        logger.info("entity_approval_changed", kind="figure", entity_id=12, by=1)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str) -> None:
    """Start a fresh log context for one request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def bind_user(user_id: int | None) -> None:
    """Attach the resolved user to the rest of the request's log lines."""
    if user_id is not None:
        structlog.contextvars.bind_contextvars(user_id=user_id)


def get_request_id() -> str | None:
    """Request id bound to the current context, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
