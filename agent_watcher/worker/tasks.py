"""Celery tasks for the agent event stream and session housekeeping."""

import asyncio
from datetime import datetime, timedelta
from typing import Any

import httpx
from celery import Task
from sqlalchemy import select
from sqlalchemy.orm import Session

from agent_watcher.core.config import get_settings
from agent_watcher.core.database import async_engine, get_sync_session
from agent_watcher.core.logging import clear_session_context, get_logger, set_session_context
from agent_watcher.models.base import utcnow
from agent_watcher.models.session import AgentSession, SessionStatus
from agent_watcher.services.event_parser import EventParser
from agent_watcher.services.stream_client import AgentStreamClient
from agent_watcher.services.watcher_service import WatcherService
from agent_watcher.worker.celery_app import celery_app

logger = get_logger(__name__)
settings = get_settings()


def backoff_delay(
    retries: int,
    base: float | None = None,
    maximum: float | None = None,
) -> float:
    """Exponential reconnect delay in seconds for the given retry count."""
    base = settings.stream_backoff_base_seconds if base is None else base
    maximum = settings.stream_backoff_max_seconds if maximum is None else maximum
    return min(base * (2 ** retries), maximum)


def mark_session_failed(db: Session, session_id: str) -> bool:
    """Move an ACTIVE session to FAILED. Returns False if nothing changed."""
    session = db.execute(
        select(AgentSession).where(AgentSession.session_id == session_id)
    ).scalar_one_or_none()
    if session is None or not session.is_active:
        return False
    session.mark_failed()
    db.commit()
    return True


def expire_sessions(db: Session, cutoff: datetime) -> int:
    """Move ACTIVE sessions started before ``cutoff`` to TIMEOUT."""
    stale = db.execute(
        select(AgentSession).where(
            AgentSession.status == SessionStatus.ACTIVE,
            AgentSession.start_time < cutoff,
        )
    ).scalars().all()

    for session in stale:
        session.mark_timed_out()
        logger.info("session_timed_out", session_id=session.session_id)

    db.commit()
    return len(stale)


class StreamTask(Task):
    """Base task that fails the session once the stream gives up for good."""

    abstract = True

    def on_failure(
        self,
        exc: Exception,
        task_id: str,
        args: tuple,
        kwargs: dict,
        einfo: Any,
    ) -> None:
        """Handle task failure by failing the session."""
        session_id = args[1] if len(args) > 1 else kwargs.get("session_id")
        if session_id:
            db = get_sync_session()
            try:
                mark_session_failed(db, session_id)
            finally:
                db.close()

        logger.error(
            "stream_failed",
            session_id=session_id,
            error=str(exc),
            task_id=task_id,
        )


async def _consume_stream(agent_id: str, session_id: str) -> int:
    parser = EventParser(WatcherService())
    client = AgentStreamClient(parser)
    try:
        return await client.consume(agent_id, session_id)
    finally:
        # Pooled connections are bound to this event loop
        await async_engine.dispose()


@celery_app.task(bind=True, base=StreamTask, max_retries=settings.stream_max_retries)
def stream_agent_events(self: Task, agent_id: str, session_id: str) -> dict[str, Any]:
    """Subscribe to an agent's live event feed and record every event.

    Connection and HTTP errors are retried with exponential backoff. The
    subscription is cancelled by revoking the task.

    Args:
        agent_id: Agent whose feed to read.
        session_id: Session the events are recorded against.

    Returns:
        Dictionary with the number of events dispatched.
    """
    set_session_context(session_id)
    try:
        dispatched = asyncio.run(_consume_stream(agent_id, session_id))
    except httpx.HTTPError as e:
        countdown = backoff_delay(self.request.retries)
        logger.warning(
            "stream_retrying",
            agent_id=agent_id,
            error=str(e),
            attempt=self.request.retries + 1,
            countdown=countdown,
        )
        raise self.retry(exc=e, countdown=countdown)
    finally:
        clear_session_context()

    return {
        "status": "completed",
        "agent_id": agent_id,
        "session_id": session_id,
        "dispatched": dispatched,
    }


@celery_app.task
def expire_stale_sessions() -> dict[str, Any]:
    """Time out sessions that stayed ACTIVE past the configured limit."""
    cutoff = utcnow() - timedelta(minutes=settings.session_timeout_minutes)
    db = get_sync_session()
    try:
        expired = expire_sessions(db, cutoff)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    if expired:
        logger.info("stale_sessions_expired", count=expired)
    return {"expired": expired}
