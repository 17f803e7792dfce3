"""Shared fixtures: in-memory SQLite databases and an ASGI test client."""

import os

# Settings are read at import time; point them at throwaway backends first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite:///:memory:")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("LOG_FORMAT", "console")

from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from agent_watcher.api.deps import get_watcher_service
from agent_watcher.main import create_app
from agent_watcher.models import Base
from agent_watcher.services.event_parser import EventParser
from agent_watcher.services.watcher_service import WatcherService


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest.fixture
def watcher(session_factory: async_sessionmaker[AsyncSession]) -> WatcherService:
    return WatcherService(session_factory)


@pytest.fixture
def parser(watcher: WatcherService) -> EventParser:
    return EventParser(watcher)


@pytest_asyncio.fixture
async def client(watcher: WatcherService) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the app in-process, backed by the test database."""
    app = create_app()
    app.dependency_overrides[get_watcher_service] = lambda: watcher
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client


@pytest.fixture
def sync_db() -> Generator[Session, None, None]:
    """Sync session on a fresh in-memory database, as Celery tasks use."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    with Session(engine, expire_on_commit=False) as db:
        yield db
    engine.dispose()
