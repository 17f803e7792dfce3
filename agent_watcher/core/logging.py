"""structlog configuration.

Records emitted while a stream task runs carry the session id of the feed
being consumed, without every call site passing it.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog

from agent_watcher.core.config import get_settings

# Session whose agent feed the current task is consuming
session_id_context: ContextVar[str | None] = ContextVar("session_id", default=None)


def add_session_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor: stamp the current feed session unless the record names one."""
    session_id = session_id_context.get()
    if session_id and "session_id" not in event_dict:
        event_dict["session_id"] = session_id
    return event_dict


def setup_logging() -> None:
    """Install the processor chain; JSON in production, colored console locally."""
    settings = get_settings()
    level = getattr(logging, settings.log_level)

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_session_id,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Celery and uvicorn log through stdlib; route them to the same stream
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_session_context(session_id: str) -> None:
    """Bind a session id to records logged by the current task."""
    session_id_context.set(session_id)


def clear_session_context() -> None:
    session_id_context.set(None)
