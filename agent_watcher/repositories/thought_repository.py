"""Queries for agent thoughts."""

from collections.abc import Sequence

from sqlalchemy import select

from agent_watcher.models.thought import AgentThought
from agent_watcher.repositories.base import BaseRepository


class ThoughtRepository(BaseRepository[AgentThought]):
    model = AgentThought

    async def list_by_session(self, session_id: str) -> Sequence[AgentThought]:
        result = await self.db.execute(
            select(AgentThought)
            .where(AgentThought.session_id == session_id)
            .order_by(AgentThought.timestamp.asc(), AgentThought.id.asc())
        )
        return result.scalars().all()
