"""ORM models for agent sessions, thoughts, actions and telemetry."""

from agent_watcher.models.action import ActionStatus, ActionType, AgentAction
from agent_watcher.models.base import Base
from agent_watcher.models.session import AgentSession, SessionStatus
from agent_watcher.models.telemetry import AgentTelemetry, MetricType
from agent_watcher.models.thought import AgentThought, ThoughtType

__all__ = [
    "ActionStatus",
    "ActionType",
    "AgentAction",
    "AgentSession",
    "AgentTelemetry",
    "AgentThought",
    "Base",
    "MetricType",
    "SessionStatus",
    "ThoughtType",
]
