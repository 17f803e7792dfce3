"""FastAPI application factory and configuration."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_watcher import __version__
from agent_watcher.api.routes import sessions, streams, telemetry
from agent_watcher.core.config import get_settings
from agent_watcher.core.database import async_engine
from agent_watcher.core.logging import get_logger, setup_logging

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info(
        "application_started",
        service=settings.service_name,
        host=settings.api_host,
        port=settings.api_port,
    )
    yield
    # Shutdown
    await async_engine.dispose()
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Agent Watcher",
        description="Telemetry ingestion and query service for AI agent execution traces",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(sessions.router, prefix="/api")
    app.include_router(telemetry.router, prefix="/api")
    app.include_router(streams.router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
