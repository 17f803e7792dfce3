"""Queries for agent actions."""

from collections.abc import Sequence

from sqlalchemy import select

from agent_watcher.models.action import AgentAction
from agent_watcher.repositories.base import BaseRepository


class ActionRepository(BaseRepository[AgentAction]):
    model = AgentAction

    async def list_by_session(self, session_id: str) -> Sequence[AgentAction]:
        result = await self.db.execute(
            select(AgentAction)
            .where(AgentAction.session_id == session_id)
            .order_by(AgentAction.start_time.asc(), AgentAction.id.asc())
        )
        return result.scalars().all()
