"""Pydantic schemas for loosely-typed agent events.

Events arrive as a flat JSON object with a ``type`` discriminator and
snake_case variant fields. Each variant gets its own model so that a
malformed event is rejected at the boundary, before any persistence call.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BaseEvent(BaseModel):
    """Common envelope. Unknown keys (agentId, sessionId, ...) are ignored."""

    model_config = ConfigDict(extra="ignore")


class ThoughtEvent(BaseEvent):
    type: Literal["thought"]
    thought_type: str | None = "GENERAL"
    content: str | None = None
    confidence: float | None = None
    processing_time_ms: float | None = None


class ActionEvent(BaseEvent):
    type: Literal["action"]
    action_name: str | None = None
    action_type: str | None = "GENERAL"
    status: str | None = None
    action_id: int | None = None
    input: Any = None
    output: Any = None


class ToolCallEvent(BaseEvent):
    type: Literal["tool_call"]
    tool_name: str | None = None
    status: str | None = None
    reasoning: str | None = None
    arguments: Any = None


class CompletionEvent(BaseEvent):
    type: Literal["completion"]
    response: str | None = None
    total_tokens: float | None = None
    total_cost: float | None = None


class ErrorEvent(BaseEvent):
    type: Literal["error"]
    error: str | None = None
    action_id: int | None = None


class MetricEvent(BaseEvent):
    type: Literal["metric"]
    metric_name: str
    metric_value: float
    metric_unit: str | None = ""
    metric_type: str | None = "CUSTOM"
    tags: str | None = None


AgentEvent = Annotated[
    Union[ThoughtEvent, ActionEvent, ToolCallEvent, CompletionEvent, ErrorEvent, MetricEvent],
    Field(discriminator="type"),
]

agent_event_adapter: TypeAdapter[AgentEvent] = TypeAdapter(AgentEvent)

EVENT_TYPES = frozenset(
    {"thought", "action", "tool_call", "completion", "error", "metric"}
)
