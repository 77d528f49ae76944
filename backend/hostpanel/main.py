"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostpanel.config import get_settings
from hostpanel.infrastructure.database import Base, engine
from hostpanel.infrastructure.database.session import async_session_factory
from hostpanel.application.services import BackgroundProcessor
from hostpanel.infrastructure.dependencies import (
    get_installation_manager,
    get_sse_manager,
    get_system_monitor,
    get_vps_manager,
)
from hostpanel.infrastructure.job_handlers import build_job_handlers
from hostpanel.infrastructure.logging.log_config import setup_logging
from hostpanel.presentation.api.router import router as api_router

# Register ORM models on Base.metadata before create_all.
import hostpanel.infrastructure.database.models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: create tables, start the job processor, tear down server state."""
    settings = get_settings()
    setup_logging()

    # 1. Create all database tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 2. Start background processor
    processor = BackgroundProcessor(
        sse_manager=get_sse_manager(),
        handlers=build_job_handlers(get_vps_manager(), get_installation_manager(), settings),
        session_factory=async_session_factory,
        poll_interval=settings.job_poll_interval,
    )
    await processor.start()
    logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    # Shutdown
    await processor.stop()
    await get_system_monitor().stop()
    await get_vps_manager().disconnect()
    await get_sse_manager().shutdown()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hostpanel.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
