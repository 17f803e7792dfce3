"""Per-entity repositories."""

from agent_watcher.repositories.action_repository import ActionRepository
from agent_watcher.repositories.session_repository import SessionRepository
from agent_watcher.repositories.telemetry_repository import TelemetryRepository
from agent_watcher.repositories.thought_repository import ThoughtRepository

__all__ = [
    "ActionRepository",
    "SessionRepository",
    "TelemetryRepository",
    "ThoughtRepository",
]
