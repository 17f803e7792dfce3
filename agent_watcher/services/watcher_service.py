"""Watcher Service: records agent sessions, thoughts, actions and telemetry.

Every public method runs in its own unit of work. Creating a thought or an
action and bumping the parent session's counter share one transaction; no
call spans more than that.
"""

from collections.abc import Sequence
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agent_watcher.core.database import AsyncSessionLocal, async_session_context
from agent_watcher.core.logging import get_logger
from agent_watcher.models.action import ActionStatus, AgentAction
from agent_watcher.models.base import utcnow
from agent_watcher.models.session import AgentSession, SessionStatus
from agent_watcher.models.telemetry import AgentTelemetry, MetricType
from agent_watcher.models.thought import AgentThought
from agent_watcher.repositories import (
    ActionRepository,
    SessionRepository,
    TelemetryRepository,
    ThoughtRepository,
)
from agent_watcher.schemas.session_schema import TimelineEntry

logger = get_logger(__name__)


def _preview(text: str | None, limit: int = 50) -> str:
    return (text or "")[:limit]


class WatcherService:
    """Single orchestration point for every write and read of agent telemetry."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self._session_factory = session_factory or AsyncSessionLocal

    def _unit_of_work(self):
        return async_session_context(self._session_factory)

    async def start_session(
        self,
        agent_id: str | None,
        user_query: str | None,
    ) -> AgentSession:
        """Open a new ACTIVE session with a fresh externally visible id."""
        async with self._unit_of_work() as db:
            session = await SessionRepository(db).add(
                AgentSession(
                    session_id=str(uuid4()),
                    agent_id=agent_id,
                    user_query=user_query,
                    status=SessionStatus.ACTIVE,
                    start_time=utcnow(),
                    total_thoughts=0,
                    total_actions=0,
                )
            )

        logger.info(
            "session_started",
            session_id=session.session_id,
            agent_id=agent_id,
        )
        return session

    async def log_thought(
        self,
        agent_id: str | None,
        session_id: str | None,
        thought_type: str | None,
        content: str | None,
        confidence_score: float | None = None,
        metadata: str | None = None,
    ) -> AgentThought:
        """Persist a thought and bump the session's thought counter if it exists."""
        async with self._unit_of_work() as db:
            thought = await ThoughtRepository(db).add(
                AgentThought(
                    agent_id=agent_id,
                    session_id=session_id,
                    thought_type=thought_type,
                    thought_content=content,
                    confidence_score=confidence_score,
                    timestamp=utcnow(),
                    thought_metadata=metadata,
                )
            )
            counted = await SessionRepository(db).increment_thoughts(session_id)

        logger.info(
            "thought_logged",
            session_id=session_id,
            thought_type=thought_type,
            content=_preview(content),
            counted=counted,
        )
        return thought

    async def start_action(
        self,
        agent_id: str | None,
        session_id: str | None,
        action_type: str | None,
        action_name: str | None,
        input_data: str | None = None,
    ) -> AgentAction:
        """Persist an IN_PROGRESS action and bump the session's action counter."""
        async with self._unit_of_work() as db:
            action = await ActionRepository(db).add(
                AgentAction(
                    agent_id=agent_id,
                    session_id=session_id,
                    action_type=action_type,
                    action_name=action_name,
                    input_data=input_data,
                    status=ActionStatus.IN_PROGRESS,
                    start_time=utcnow(),
                )
            )
            counted = await SessionRepository(db).increment_actions(session_id)

        logger.info(
            "action_started",
            session_id=session_id,
            action_id=action.id,
            action_type=action_type,
            action_name=action_name,
            counted=counted,
        )
        return action

    async def complete_action(
        self,
        action_id: int,
        output_data: str | None = None,
    ) -> AgentAction | None:
        """Mark an action COMPLETED. Unknown ids are ignored."""
        async with self._unit_of_work() as db:
            action = await ActionRepository(db).get(action_id)
            if action is None:
                logger.warning("action_not_found", action_id=action_id, operation="complete")
                return None
            if action.is_terminal:
                logger.warning(
                    "action_already_finished",
                    action_id=action_id,
                    status=action.status.value,
                )
                return action
            action.complete(output_data)

        logger.info(
            "action_completed",
            session_id=action.session_id,
            action_id=action_id,
            action_name=action.action_name,
            duration_ms=action.duration_ms,
        )
        return action

    async def fail_action(
        self,
        action_id: int,
        error_message: str | None,
    ) -> AgentAction | None:
        """Mark an action FAILED. Unknown ids are ignored."""
        async with self._unit_of_work() as db:
            action = await ActionRepository(db).get(action_id)
            if action is None:
                logger.warning("action_not_found", action_id=action_id, operation="fail")
                return None
            if action.is_terminal:
                logger.warning(
                    "action_already_finished",
                    action_id=action_id,
                    status=action.status.value,
                )
                return action
            action.fail(error_message)

        logger.error(
            "action_failed",
            session_id=action.session_id,
            action_id=action_id,
            action_name=action.action_name,
            error=error_message,
        )
        return action

    async def log_telemetry(
        self,
        agent_id: str | None,
        session_id: str | None,
        metric_name: str,
        metric_value: float,
        metric_unit: str | None = "",
        metric_type: str | None = MetricType.CUSTOM.value,
        tags: str | None = None,
    ) -> AgentTelemetry:
        """Append a metric observation."""
        async with self._unit_of_work() as db:
            metric = await TelemetryRepository(db).add(
                AgentTelemetry(
                    agent_id=agent_id,
                    session_id=session_id,
                    metric_name=metric_name,
                    metric_value=metric_value,
                    metric_unit=metric_unit if metric_unit is not None else "",
                    metric_type=metric_type or MetricType.CUSTOM.value,
                    timestamp=utcnow(),
                    tags=tags,
                )
            )

        logger.debug(
            "telemetry_logged",
            session_id=session_id,
            metric_name=metric_name,
            metric_value=metric_value,
            metric_unit=metric.metric_unit,
        )
        return metric

    async def complete_session(
        self,
        session_id: str,
        final_response: str | None,
    ) -> AgentSession | None:
        """Move an ACTIVE session to COMPLETED. Unknown ids are ignored."""
        async with self._unit_of_work() as db:
            session = await SessionRepository(db).get_by_session_id(session_id)
            if session is None:
                logger.warning("session_not_found", session_id=session_id, operation="complete")
                return None
            if not session.is_active:
                logger.warning(
                    "session_already_finished",
                    session_id=session_id,
                    status=session.status.value,
                )
                return session
            session.complete(final_response)

        logger.info("session_completed", session_id=session_id)
        return session

    async def get_session(self, session_id: str) -> AgentSession | None:
        async with self._unit_of_work() as db:
            return await SessionRepository(db).get_by_session_id(session_id)

    async def get_session_thoughts(self, session_id: str) -> Sequence[AgentThought]:
        async with self._unit_of_work() as db:
            return await ThoughtRepository(db).list_by_session(session_id)

    async def get_session_actions(self, session_id: str) -> Sequence[AgentAction]:
        async with self._unit_of_work() as db:
            return await ActionRepository(db).list_by_session(session_id)

    async def get_session_metrics(
        self,
        session_id: str,
        metric_type: str | None = None,
    ) -> Sequence[AgentTelemetry]:
        async with self._unit_of_work() as db:
            return await TelemetryRepository(db).list_by_session(session_id, metric_type)

    async def get_agent_sessions(self, agent_id: str) -> Sequence[AgentSession]:
        async with self._unit_of_work() as db:
            return await SessionRepository(db).list_by_agent(agent_id)

    async def get_session_timeline(self, session_id: str) -> list[TimelineEntry]:
        """Thoughts and actions of a session merged in chronological order."""
        async with self._unit_of_work() as db:
            thoughts = await ThoughtRepository(db).list_by_session(session_id)
            actions = await ActionRepository(db).list_by_session(session_id)

        entries = [
            TimelineEntry(
                type="THOUGHT",
                id=thought.id,
                timestamp=thought.timestamp,
                content=thought.thought_content,
                status=thought.thought_type,
                metadata=thought.thought_metadata,
            )
            for thought in thoughts
        ]
        entries.extend(
            TimelineEntry(
                type="ACTION",
                id=action.id,
                timestamp=action.start_time,
                content=action.action_name,
                status=action.status.value,
                metadata=action.output_data or action.error_message,
            )
            for action in actions
        )
        # Stable sort keeps thought-before-action on identical timestamps
        entries.sort(key=lambda entry: entry.timestamp)
        return entries
