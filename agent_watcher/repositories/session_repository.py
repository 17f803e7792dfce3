"""Queries for agent sessions."""

from collections.abc import Sequence

from sqlalchemy import select, update

from agent_watcher.models.session import AgentSession
from agent_watcher.repositories.base import BaseRepository


class SessionRepository(BaseRepository[AgentSession]):
    model = AgentSession

    async def get_by_session_id(self, session_id: str) -> AgentSession | None:
        result = await self.db.execute(
            select(AgentSession).where(AgentSession.session_id == session_id)
        )
        return result.scalar_one_or_none()

    async def list_by_agent(self, agent_id: str) -> Sequence[AgentSession]:
        """Sessions for an agent, most recently started first."""
        result = await self.db.execute(
            select(AgentSession)
            .where(AgentSession.agent_id == agent_id)
            .order_by(AgentSession.start_time.desc(), AgentSession.id.desc())
        )
        return result.scalars().all()

    async def increment_thoughts(self, session_id: str) -> bool:
        return await self._increment(AgentSession.total_thoughts, session_id)

    async def increment_actions(self, session_id: str) -> bool:
        return await self._increment(AgentSession.total_actions, session_id)

    async def _increment(self, counter, session_id: str) -> bool:
        """Bump a counter in a single UPDATE; False when no session matched."""
        result = await self.db.execute(
            update(AgentSession)
            .where(AgentSession.session_id == session_id)
            .values({counter: counter + 1})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
