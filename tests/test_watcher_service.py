"""Unit tests for WatcherService."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from agent_watcher.models.action import ActionStatus, AgentAction
from agent_watcher.models.base import as_utc
from agent_watcher.models.session import AgentSession, SessionStatus
from agent_watcher.models.telemetry import AgentTelemetry
from agent_watcher.models.thought import AgentThought
from agent_watcher.repositories import ActionRepository, ThoughtRepository
from agent_watcher.services.watcher_service import WatcherService


class TestSessionLifecycle:
    """Tests for starting, completing and fetching sessions."""

    async def test_start_session_is_active(self, watcher: WatcherService) -> None:
        """A new session is ACTIVE with zero counters and no end time."""
        session = await watcher.start_session("agent-123", "test")

        assert session.id is not None
        assert session.status == SessionStatus.ACTIVE
        assert session.end_time is None
        assert session.total_thoughts == 0
        assert session.total_actions == 0
        assert session.agent_id == "agent-123"
        assert session.user_query == "test"

    async def test_session_ids_are_unique(self, watcher: WatcherService) -> None:
        sessions = [await watcher.start_session("agent-1", f"q{i}") for i in range(10)]
        assert len({s.session_id for s in sessions}) == 10

    async def test_start_session_accepts_null_fields(self, watcher: WatcherService) -> None:
        """Empty input is stored as-is rather than rejected."""
        session = await watcher.start_session(None, None)

        fetched = await watcher.get_session(session.session_id)
        assert fetched is not None
        assert fetched.agent_id is None
        assert fetched.user_query is None

    async def test_complete_session(self, watcher: WatcherService) -> None:
        session = await watcher.start_session("agent-123", "test")

        await watcher.complete_session(session.session_id, "done")

        fetched = await watcher.get_session(session.session_id)
        assert fetched.status == SessionStatus.COMPLETED
        assert fetched.final_response == "done"
        assert fetched.end_time is not None
        assert as_utc(fetched.end_time) >= as_utc(fetched.start_time)

    async def test_complete_unknown_session_is_noop(self, watcher: WatcherService) -> None:
        result = await watcher.complete_session("does-not-exist", "done")
        assert result is None

    async def test_complete_session_twice_keeps_first_result(
        self, watcher: WatcherService
    ) -> None:
        """A terminal session never changes status or end time again."""
        session = await watcher.start_session("agent-123", "test")
        await watcher.complete_session(session.session_id, "first")
        first = await watcher.get_session(session.session_id)

        await watcher.complete_session(session.session_id, "second")

        second = await watcher.get_session(session.session_id)
        assert second.final_response == "first"
        assert second.end_time == first.end_time

    async def test_get_unknown_session_returns_none(self, watcher: WatcherService) -> None:
        assert await watcher.get_session("missing") is None

    async def test_agent_sessions_most_recent_first(self, watcher: WatcherService) -> None:
        first = await watcher.start_session("agent-a", "one")
        await asyncio.sleep(0.01)
        second = await watcher.start_session("agent-a", "two")
        await watcher.start_session("agent-b", "other")

        sessions = await watcher.get_agent_sessions("agent-a")

        assert [s.session_id for s in sessions] == [second.session_id, first.session_id]


class TestThoughts:
    """Tests for thought logging and listing."""

    async def test_log_thought_increments_counter(self, watcher: WatcherService) -> None:
        session = await watcher.start_session("agent-123", "test")

        thought = await watcher.log_thought(
            "agent-123", session.session_id, "REASONING", "step 1", 0.9
        )

        assert thought.id is not None
        assert thought.thought_type == "REASONING"
        assert thought.thought_content == "step 1"
        assert thought.confidence_score == pytest.approx(0.9)
        assert thought.timestamp is not None

        fetched = await watcher.get_session(session.session_id)
        assert fetched.total_thoughts == 1

    async def test_thought_count_matches_logged_thoughts(
        self, watcher: WatcherService
    ) -> None:
        session = await watcher.start_session("agent-123", "test")

        for i in range(5):
            await watcher.log_thought("agent-123", session.session_id, "PLANNING", f"t{i}")

        fetched = await watcher.get_session(session.session_id)
        thoughts = await watcher.get_session_thoughts(session.session_id)
        assert fetched.total_thoughts == 5
        assert len(thoughts) == 5

    async def test_thought_for_unknown_session_is_still_stored(
        self, watcher: WatcherService
    ) -> None:
        thought = await watcher.log_thought("agent-x", "orphan", "REASONING", "alone")

        assert thought.id is not None
        thoughts = await watcher.get_session_thoughts("orphan")
        assert [t.id for t in thoughts] == [thought.id]

    async def test_confidence_is_not_bounded(self, watcher: WatcherService) -> None:
        thought = await watcher.log_thought("a", "s", "REASONING", "sure", 7.5)
        assert thought.confidence_score == pytest.approx(7.5)

    async def test_metadata_and_missing_content(self, watcher: WatcherService) -> None:
        thought = await watcher.log_thought(
            "a", "s", "CUSTOM_KIND", None, None, metadata='{"k": 1}'
        )
        assert thought.thought_content is None
        assert thought.thought_type == "CUSTOM_KIND"
        assert thought.thought_metadata == '{"k": 1}'
        assert thought.parent_thought_id is None

    async def test_thoughts_ordered_by_timestamp(
        self, watcher: WatcherService, session_factory
    ) -> None:
        """Listing order follows timestamps, not insertion order."""
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        async with session_factory() as db:
            repo = ThoughtRepository(db)
            for offset, content in ((30, "third"), (10, "first"), (20, "second")):
                await repo.add(
                    AgentThought(
                        agent_id="a",
                        session_id="ordered",
                        thought_type="REASONING",
                        thought_content=content,
                        timestamp=base + timedelta(seconds=offset),
                    )
                )
            await db.commit()

        thoughts = await watcher.get_session_thoughts("ordered")

        assert [t.thought_content for t in thoughts] == ["first", "second", "third"]


class TestActions:
    """Tests for the action start/complete/fail lifecycle."""

    async def test_start_action(self, watcher: WatcherService) -> None:
        session = await watcher.start_session("agent-123", "test")

        action = await watcher.start_action(
            "agent-123", session.session_id, "API_CALL", "fetch", '{"q": 1}'
        )

        assert action.status == ActionStatus.IN_PROGRESS
        assert action.start_time is not None
        assert action.input_data == '{"q": 1}'
        fetched = await watcher.get_session(session.session_id)
        assert fetched.total_actions == 1

    async def test_complete_action(self, watcher: WatcherService) -> None:
        action = await watcher.start_action("a", "s", "API_CALL", "fetch")

        completed = await watcher.complete_action(action.id, '{"ok":true}')

        assert completed.status == ActionStatus.COMPLETED
        assert completed.output_data == '{"ok":true}'
        assert completed.end_time is not None
        assert completed.duration_ms is not None
        assert completed.duration_ms >= 0

    async def test_fail_action(self, watcher: WatcherService) -> None:
        action = await watcher.start_action("a", "s", "TOOL_USE", "search")

        failed = await watcher.fail_action(action.id, "timeout")

        assert failed.status == ActionStatus.FAILED
        assert failed.error_message == "timeout"
        assert failed.output_data is None
        assert failed.duration_ms >= 0

    async def test_complete_unknown_action_is_noop(self, watcher: WatcherService) -> None:
        assert await watcher.complete_action(99999, "x") is None
        assert await watcher.fail_action(99999, "x") is None

    async def test_terminal_action_is_not_reopened(self, watcher: WatcherService) -> None:
        """Second completion leaves the first end time and duration in place."""
        action = await watcher.start_action("a", "s", "API_CALL", "fetch")
        first = await watcher.complete_action(action.id, "one")

        again = await watcher.complete_action(action.id, "two")
        failed = await watcher.fail_action(action.id, "late")

        actions = await watcher.get_session_actions("s")
        stored = actions[0]
        assert again.status == ActionStatus.COMPLETED
        assert failed.status == ActionStatus.COMPLETED
        assert stored.output_data == "one"
        assert stored.error_message is None
        assert stored.duration_ms == first.duration_ms

    async def test_actions_ordered_by_start_time(
        self, watcher: WatcherService, session_factory
    ) -> None:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        async with session_factory() as db:
            repo = ActionRepository(db)
            for offset, name in ((5, "late"), (1, "early")):
                await repo.add(
                    AgentAction(
                        agent_id="a",
                        session_id="ordered",
                        action_name=name,
                        status=ActionStatus.IN_PROGRESS,
                        start_time=base + timedelta(seconds=offset),
                    )
                )
            await db.commit()

        actions = await watcher.get_session_actions("ordered")

        assert [a.action_name for a in actions] == ["early", "late"]


class TestSessionIdColumns:
    """Session ids are caller-supplied and may be long."""

    @pytest.mark.parametrize("model", [AgentSession, AgentThought, AgentAction, AgentTelemetry])
    def test_session_id_holds_255_characters(self, model) -> None:
        assert model.__table__.c.session_id.type.length == 255

    async def test_long_session_id_round_trips(self, watcher: WatcherService) -> None:
        session_id = "run-" + "x" * 200

        await watcher.log_thought("a", session_id, "REASONING", "deep")
        await watcher.log_telemetry("a", session_id, "latency", 1.0)

        assert len(await watcher.get_session_thoughts(session_id)) == 1
        assert len(await watcher.get_session_metrics(session_id)) == 1


class TestTelemetry:
    """Tests for metric logging and listing."""

    async def test_log_telemetry_defaults(self, watcher: WatcherService) -> None:
        metric = await watcher.log_telemetry("a", "s", "latency", 12.5)

        assert metric.metric_unit == ""
        assert metric.metric_type == "CUSTOM"
        assert metric.metric_value == pytest.approx(12.5)

    async def test_log_telemetry_does_not_touch_session(
        self, watcher: WatcherService
    ) -> None:
        session = await watcher.start_session("a", "q")

        await watcher.log_telemetry("a", session.session_id, "tokens", 10, "tokens", "TOKENS")

        fetched = await watcher.get_session(session.session_id)
        assert fetched.total_thoughts == 0
        assert fetched.total_actions == 0

    async def test_metrics_filtered_by_type(self, watcher: WatcherService) -> None:
        await watcher.log_telemetry("a", "s", "latency", 1.0, "ms", "LATENCY")
        await watcher.log_telemetry("a", "s", "tokens", 2.0, "tokens", "TOKENS")

        all_metrics = await watcher.get_session_metrics("s")
        tokens = await watcher.get_session_metrics("s", "TOKENS")

        assert [m.metric_name for m in all_metrics] == ["latency", "tokens"]
        assert [m.metric_name for m in tokens] == ["tokens"]


class TestTimeline:
    """Tests for the merged session timeline."""

    async def test_timeline_merges_thoughts_and_actions(
        self, watcher: WatcherService
    ) -> None:
        session = await watcher.start_session("a", "q")
        await watcher.log_thought("a", session.session_id, "PLANNING", "plan")
        await asyncio.sleep(0.01)
        action = await watcher.start_action("a", session.session_id, "API_CALL", "fetch")
        await watcher.complete_action(action.id, "result")
        await asyncio.sleep(0.01)
        await watcher.log_thought("a", session.session_id, "REFLECTION", "looks good")

        timeline = await watcher.get_session_timeline(session.session_id)

        assert [(e.type, e.content) for e in timeline] == [
            ("THOUGHT", "plan"),
            ("ACTION", "fetch"),
            ("THOUGHT", "looks good"),
        ]
        assert timeline[1].status == "COMPLETED"
        assert timeline[1].metadata == "result"


async def test_full_session_scenario(watcher: WatcherService) -> None:
    """Start, think, act, complete: counters and statuses line up."""
    session = await watcher.start_session("agent-123", "test")
    assert session.status == SessionStatus.ACTIVE

    await watcher.log_thought("agent-123", session.session_id, "REASONING", "step 1", 0.9)
    assert (await watcher.get_session(session.session_id)).total_thoughts == 1

    action = await watcher.start_action("agent-123", session.session_id, "API_CALL", "fetch")
    assert action.status == ActionStatus.IN_PROGRESS
    assert (await watcher.get_session(session.session_id)).total_actions == 1

    completed = await watcher.complete_action(action.id, '{"ok":true}')
    assert completed.status == ActionStatus.COMPLETED
    assert completed.duration_ms >= 0

    await watcher.complete_session(session.session_id, "done")
    final = await watcher.get_session(session.session_id)
    assert final.status == SessionStatus.COMPLETED
    assert final.end_time is not None
    assert final.final_response == "done"
