"""Pydantic schemas for agent event feed subscriptions."""

from agent_watcher.schemas.base import CamelModel


class StreamSubscribeRequest(CamelModel):
    """Request body for subscribing to an agent's event feed."""

    agent_id: str
    session_id: str


class StreamSubscription(CamelModel):
    """A queued or cancelled feed subscription."""

    task_id: str
    status: str
    agent_id: str | None = None
    session_id: str | None = None
