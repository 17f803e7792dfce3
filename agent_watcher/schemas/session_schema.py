"""Pydantic schemas for agent sessions."""

from datetime import datetime

from pydantic import Field

from agent_watcher.models.session import SessionStatus
from agent_watcher.schemas.base import CamelModel


class SessionStartRequest(CamelModel):
    """Request body for starting a session. Missing fields pass through as None."""

    agent_id: str | None = None
    user_query: str | None = None


class SessionCompleteRequest(CamelModel):
    """Request body for completing a session."""

    final_response: str | None = None


class SessionResponse(CamelModel):
    """Response schema for a session."""

    id: int
    session_id: str
    agent_id: str | None = None
    user_query: str | None = None
    status: SessionStatus
    start_time: datetime
    end_time: datetime | None = None
    total_thoughts: int = 0
    total_actions: int = 0
    final_response: str | None = None


class TimelineEntry(CamelModel):
    """One thought or action on a session's merged timeline."""

    type: str = Field(description="THOUGHT or ACTION")
    id: int
    timestamp: datetime
    content: str | None = None
    status: str | None = None
    metadata: str | None = None
