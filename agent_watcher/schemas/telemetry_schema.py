"""Pydantic schemas for thoughts, actions and metrics."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field

from agent_watcher.models.action import ActionStatus
from agent_watcher.schemas.base import CamelModel


class ThoughtLogRequest(CamelModel):
    """Request body for logging a thought."""

    agent_id: str | None = None
    session_id: str | None = None
    thought_type: str | None = None
    content: str | None = None
    confidence: float | None = None
    metadata: str | None = None


class ActionLogRequest(CamelModel):
    """Request body for starting an action."""

    agent_id: str | None = None
    session_id: str | None = None
    action_type: str | None = None
    action_name: str | None = None
    input_data: Any = None


class MetricLogRequest(CamelModel):
    """Request body for logging a metric. Name and value are required."""

    agent_id: str | None = None
    session_id: str | None = None
    metric_name: str
    metric_value: float
    metric_unit: str | None = ""
    metric_type: str | None = "CUSTOM"
    tags: str | None = None


class ThoughtResponse(CamelModel):
    """Response schema for a thought."""

    id: int
    agent_id: str | None = None
    session_id: str | None = None
    thought_type: str | None = None
    thought_content: str | None = None
    confidence_score: float | None = None
    timestamp: datetime
    parent_thought_id: int | None = None
    metadata: str | None = Field(
        default=None,
        validation_alias=AliasChoices("thought_metadata", "metadata"),
        serialization_alias="metadata",
    )


class ActionResponse(CamelModel):
    """Response schema for an action."""

    id: int
    agent_id: str | None = None
    session_id: str | None = None
    action_type: str | None = None
    action_name: str | None = None
    input_data: str | None = None
    output_data: str | None = None
    status: ActionStatus
    start_time: datetime
    end_time: datetime | None = None
    duration_ms: int | None = None
    error_message: str | None = None
    related_thought_id: int | None = None


class MetricResponse(CamelModel):
    """Response schema for a metric observation."""

    id: int
    agent_id: str | None = None
    session_id: str | None = None
    metric_name: str
    metric_value: float
    metric_unit: str = ""
    metric_type: str
    timestamp: datetime
    tags: str | None = None
