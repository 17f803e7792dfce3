"""Queries for agent telemetry."""

from collections.abc import Sequence

from sqlalchemy import select

from agent_watcher.models.telemetry import AgentTelemetry
from agent_watcher.repositories.base import BaseRepository


class TelemetryRepository(BaseRepository[AgentTelemetry]):
    model = AgentTelemetry

    async def list_by_session(
        self,
        session_id: str,
        metric_type: str | None = None,
    ) -> Sequence[AgentTelemetry]:
        query = select(AgentTelemetry).where(AgentTelemetry.session_id == session_id)
        if metric_type:
            query = query.where(AgentTelemetry.metric_type == metric_type)
        query = query.order_by(AgentTelemetry.timestamp.asc(), AgentTelemetry.id.asc())
        result = await self.db.execute(query)
        return result.scalars().all()
