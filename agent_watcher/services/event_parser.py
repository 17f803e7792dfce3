"""Event Parser: maps loosely-typed agent events onto Watcher Service calls."""

import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from agent_watcher.core.logging import get_logger
from agent_watcher.models.action import ActionType
from agent_watcher.models.telemetry import MetricType
from agent_watcher.models.thought import ThoughtType
from agent_watcher.schemas.event_schema import (
    EVENT_TYPES,
    ActionEvent,
    CompletionEvent,
    ErrorEvent,
    MetricEvent,
    ThoughtEvent,
    ToolCallEvent,
    agent_event_adapter,
)
from agent_watcher.services.watcher_service import WatcherService

logger = get_logger(__name__)


def serialize_payload(data: Any) -> str | None:
    """Render an opaque payload as JSON text.

    Strings are kept verbatim; anything ``json`` cannot encode falls back to
    its ``str()`` form.
    """
    if data is None:
        return None
    if isinstance(data, str):
        return data
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as e:
        logger.warning("payload_not_json_serializable", error=str(e))
        return str(data)


class EventParser:
    """Stateless dispatcher from agent events to persistence calls.

    ``process_event`` never raises: malformed events and failures during
    dispatch are logged and dropped.
    """

    def __init__(self, watcher: WatcherService) -> None:
        self.watcher = watcher
        self._handlers: dict[str, Callable[[str | None, str | None, Any], Awaitable[None]]] = {
            "thought": self._process_thought,
            "action": self._process_action,
            "tool_call": self._process_tool_call,
            "completion": self._process_completion,
            "error": self._process_error,
            "metric": self._process_metric,
        }

    async def process_event(
        self,
        agent_id: str | None,
        session_id: str | None,
        payload: Mapping[str, Any],
    ) -> bool:
        """Validate and dispatch one event.

        Returns:
            True if the event was dispatched, False if it was dropped.
        """
        try:
            event_type = payload.get("type")
            if event_type not in EVENT_TYPES:
                logger.warning("unknown_event_type", event_type=event_type, session_id=session_id)
                return False

            try:
                event = agent_event_adapter.validate_python(dict(payload))
            except ValidationError as e:
                logger.warning(
                    "event_rejected",
                    event_type=event_type,
                    session_id=session_id,
                    errors=e.errors(include_url=False, include_input=False),
                )
                return False

            await self._handlers[event.type](agent_id, session_id, event)
            return True
        except Exception:
            logger.exception("event_processing_failed", session_id=session_id)
            return False

    async def _process_thought(
        self, agent_id: str | None, session_id: str | None, event: ThoughtEvent
    ) -> None:
        await self.watcher.log_thought(
            agent_id,
            session_id,
            event.thought_type or ThoughtType.GENERAL.value,
            event.content,
            event.confidence,
        )

        if event.processing_time_ms is not None:
            await self.watcher.log_telemetry(
                agent_id,
                session_id,
                "thinking_time",
                event.processing_time_ms,
                "ms",
                MetricType.LATENCY.value,
            )

    async def _process_action(
        self, agent_id: str | None, session_id: str | None, event: ActionEvent
    ) -> None:
        if event.status == "started":
            await self.watcher.start_action(
                agent_id,
                session_id,
                event.action_type or ActionType.GENERAL.value,
                event.action_name,
                serialize_payload(event.input),
            )
        elif event.status == "completed":
            if event.action_id is None:
                logger.debug("action_completion_without_id", session_id=session_id)
                return
            await self.watcher.complete_action(event.action_id, serialize_payload(event.output))
        else:
            logger.debug("action_status_ignored", status=event.status, session_id=session_id)

    async def _process_tool_call(
        self, agent_id: str | None, session_id: str | None, event: ToolCallEvent
    ) -> None:
        if event.status == "selected":
            reasoning = (
                event.reasoning
                if event.reasoning is not None
                else f"Selected tool: {event.tool_name}"
            )
            await self.watcher.log_thought(
                agent_id, session_id, ThoughtType.TOOL_SELECTION.value, reasoning, None
            )

        await self.watcher.start_action(
            agent_id,
            session_id,
            ActionType.TOOL_USE.value,
            event.tool_name,
            serialize_payload(event.arguments),
        )

    async def _process_completion(
        self, agent_id: str | None, session_id: str | None, event: CompletionEvent
    ) -> None:
        await self.watcher.complete_session(session_id, event.response)

        if event.total_tokens is not None:
            await self.watcher.log_telemetry(
                agent_id, session_id, "total_tokens", event.total_tokens, "tokens",
                MetricType.TOKENS.value,
            )
        if event.total_cost is not None:
            await self.watcher.log_telemetry(
                agent_id, session_id, "total_cost", event.total_cost, "usd",
                MetricType.COST.value,
            )

    async def _process_error(
        self, agent_id: str | None, session_id: str | None, event: ErrorEvent
    ) -> None:
        if event.action_id is not None:
            await self.watcher.fail_action(event.action_id, event.error)

        await self.watcher.log_thought(
            agent_id, session_id, ThoughtType.ERROR.value, event.error, 0.0
        )
        await self.watcher.log_telemetry(
            agent_id, session_id, "errors", 1.0, "count", MetricType.ERROR_RATE.value
        )

    async def _process_metric(
        self, agent_id: str | None, session_id: str | None, event: MetricEvent
    ) -> None:
        await self.watcher.log_telemetry(
            agent_id,
            session_id,
            event.metric_name,
            event.metric_value,
            event.metric_unit,
            event.metric_type,
            event.tags,
        )
