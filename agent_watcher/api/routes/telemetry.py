"""API routes for telemetry ingestion."""

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import PlainTextResponse

from agent_watcher.api.deps import Parser, Watcher
from agent_watcher.core.logging import get_logger
from agent_watcher.schemas.telemetry_schema import (
    ActionLogRequest,
    MetricLogRequest,
    ThoughtLogRequest,
)
from agent_watcher.services.event_parser import serialize_payload

logger = get_logger(__name__)

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


@router.post("/events", response_class=PlainTextResponse)
async def submit_event(
    parser: Parser,
    event: dict[str, Any] = Body(...),
) -> str:
    """Submit a generic agent event.

    The body carries ``agentId``, ``sessionId``, a ``type`` discriminator and
    the type's own fields. Malformed events are logged and dropped; the
    caller is acknowledged either way.
    """
    agent_id = event.get("agentId")
    session_id = event.get("sessionId")

    logger.info(
        "telemetry_event_received",
        event_type=event.get("type"),
        agent_id=agent_id,
        session_id=session_id,
    )

    await parser.process_event(agent_id, session_id, event)
    return "Event received"


@router.post("/thoughts", response_class=PlainTextResponse)
async def log_thought(request: ThoughtLogRequest, watcher: Watcher) -> str:
    """Log a thought."""
    await watcher.log_thought(
        request.agent_id,
        request.session_id,
        request.thought_type,
        request.content,
        request.confidence,
        request.metadata,
    )
    return "Thought logged"


@router.post("/actions", response_class=PlainTextResponse)
async def log_action(request: ActionLogRequest, watcher: Watcher) -> str:
    """Log the start of an action."""
    await watcher.start_action(
        request.agent_id,
        request.session_id,
        request.action_type,
        request.action_name,
        serialize_payload(request.input_data),
    )
    return "Action logged"


@router.post("/metrics", response_class=PlainTextResponse)
async def log_metric(request: MetricLogRequest, watcher: Watcher) -> str:
    """Log a metric observation."""
    await watcher.log_telemetry(
        request.agent_id,
        request.session_id,
        request.metric_name,
        request.metric_value,
        request.metric_unit,
        request.metric_type,
        request.tags,
    )
    return "Metric logged"
