"""API routes for agent session lifecycle and per-session queries."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from agent_watcher.api.deps import Watcher
from agent_watcher.core.logging import get_logger
from agent_watcher.schemas.session_schema import (
    SessionCompleteRequest,
    SessionResponse,
    SessionStartRequest,
    TimelineEntry,
)
from agent_watcher.schemas.telemetry_schema import (
    ActionResponse,
    MetricResponse,
    ThoughtResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/start", response_model=SessionResponse)
async def start_session(
    request: SessionStartRequest,
    watcher: Watcher,
) -> SessionResponse:
    """Start a new agent session.

    Args:
        request: Agent id and the user query that started the run.
        watcher: Watcher service.

    Returns:
        The new session, status ACTIVE.
    """
    session = await watcher.start_session(request.agent_id, request.user_query)
    return SessionResponse.model_validate(session)


# Registered before "/{session_id}/..." so "agent" is never read as a session id
@router.get("/agent/{agent_id}", response_model=list[SessionResponse])
async def get_agent_sessions(agent_id: str, watcher: Watcher) -> list[SessionResponse]:
    """Get all sessions of an agent, most recent first."""
    sessions = await watcher.get_agent_sessions(agent_id)
    return [SessionResponse.model_validate(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, watcher: Watcher) -> SessionResponse:
    """Get session details.

    Raises:
        HTTPException: 404 if the session does not exist.
    """
    session = await watcher.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return SessionResponse.model_validate(session)


@router.get("/{session_id}/thoughts", response_model=list[ThoughtResponse])
async def get_session_thoughts(session_id: str, watcher: Watcher) -> list[ThoughtResponse]:
    """Get the thoughts of a session in chronological order."""
    thoughts = await watcher.get_session_thoughts(session_id)
    return [ThoughtResponse.model_validate(t) for t in thoughts]


@router.get("/{session_id}/actions", response_model=list[ActionResponse])
async def get_session_actions(session_id: str, watcher: Watcher) -> list[ActionResponse]:
    """Get the actions of a session in chronological order."""
    actions = await watcher.get_session_actions(session_id)
    return [ActionResponse.model_validate(a) for a in actions]


@router.get("/{session_id}/metrics", response_model=list[MetricResponse])
async def get_session_metrics(
    session_id: str,
    watcher: Watcher,
    metric_type: Annotated[str | None, Query(alias="metricType")] = None,
) -> list[MetricResponse]:
    """Get the metrics of a session in chronological order, optionally by type."""
    metrics = await watcher.get_session_metrics(session_id, metric_type)
    return [MetricResponse.model_validate(m) for m in metrics]


@router.get("/{session_id}/timeline", response_model=list[TimelineEntry])
async def get_session_timeline(session_id: str, watcher: Watcher) -> list[TimelineEntry]:
    """Get thoughts and actions of a session merged into one timeline."""
    return await watcher.get_session_timeline(session_id)


@router.post("/{session_id}/complete")
async def complete_session(
    session_id: str,
    request: SessionCompleteRequest,
    watcher: Watcher,
) -> Response:
    """Complete a session. Unknown session ids are accepted and ignored."""
    await watcher.complete_session(session_id, request.final_response)
    return Response(status_code=status.HTTP_200_OK)
