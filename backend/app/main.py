"""FastAPI application factory and main entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.reserve_assets.application.use_cases.claim_rewards import ClaimRewardsUseCase
from app.reserve_assets.domain.events import DomainEvent, EventLog
from app.reserve_assets.infrastructure.assets_factory import create_default_registry
from app.reserve_assets.infrastructure.external.web3_contracts import (
    Web3CallExecutor,
    create_web3,
)
from app.reserve_assets.infrastructure.tasks.refresh_tasks import asset_refresh_loop
from app.reserve_assets.presentation.api import assets, health, rewards

settings = get_settings()
logger = get_logger(__name__)


def log_event(event: DomainEvent) -> None:
    """Write every domain event to the application log."""
    logger.info(f"Event: {event}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    setup_logging(level="DEBUG" if settings.debug else "INFO")
    logger.info("Reserve asset service starting up...")
    logger.info(f"Environment: {settings.app_env}")

    web3 = create_web3(settings.eth_rpc_url, settings.http_timeout_seconds)
    events = EventLog(max_events=settings.event_log_size)
    events.subscribe(log_event)
    registry = await asyncio.to_thread(create_default_registry, settings, events, web3)
    app.state.events = events
    app.state.registry = registry
    app.state.claim_rewards = ClaimRewardsUseCase(
        registry=registry,
        executor=Web3CallExecutor(web3),
        events=events,
    )

    logger.info(
        f"Starting asset refresh background task (every {settings.refresh_interval_seconds}s)..."
    )
    refresh_task = asyncio.create_task(
        asset_refresh_loop(registry, settings.refresh_interval_seconds)
    )

    yield

    # Shutdown
    logger.info("Reserve asset service shutting down...")
    refresh_task.cancel()
    try:
        await refresh_task
    except asyncio.CancelledError:
        logger.info("Asset refresh task cancelled")
    registry.close_all()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Reserve Asset Service",
        description="Strict and fallback pricing, exchange rates and default status for basket collateral",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.is_development else None,
        redoc_url="/api/redoc" if settings.is_development else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(assets.router, prefix="/api", tags=["Assets"])
    app.include_router(rewards.router, prefix="/api", tags=["Rewards"])

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
