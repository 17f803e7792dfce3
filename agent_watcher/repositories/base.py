"""Generic repository over a single ORM model."""

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from agent_watcher.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Point lookups and inserts shared by every entity repository.

    Repositories never commit; the caller's unit of work owns the transaction.
    """

    model: type[ModelT]

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def add(self, instance: ModelT) -> ModelT:
        """Stage an instance and flush so store-assigned ids are populated."""
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def get(self, pk: int) -> ModelT | None:
        return await self.db.get(self.model, pk)
