"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI

from omad_tracker.api.analytics import router as analytics_router
from omad_tracker.api.auth import router as auth_router
from omad_tracker.api.daily_logs import router as daily_logs_router
from omad_tracker.api.errors import register_exception_handlers
from omad_tracker.api.profile import router as profile_router
from omad_tracker.api.rate_limit import limiter
from omad_tracker.app_logging import configure_logging
from omad_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    if not container.auth_service.sign_in_enabled:
        logger.warning("Google OAuth not configured; sign-in is disabled")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "OMAD tracker API started",
            extra={"environment": container.settings.environment},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="OMAD Tracker", lifespan=lifespan)
    app.state.container = container
    # The limiter is shared by every app in the process; start each one clean.
    limiter.enabled = container.settings.rate_limit_enabled
    limiter.reset()
    app.state.limiter = limiter

    register_exception_handlers(app)
    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(daily_logs_router)
    app.include_router(analytics_router)

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(tz=UTC).isoformat()}

    return app
