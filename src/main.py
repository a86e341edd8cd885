from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
import structlog

from src.config import Settings, get_settings
from src.dependencies import AppContainer, build_container
from src.shared.exceptions import register_exception_handlers  # central mapping
from src.shared.health import router as health_router
from src.shared.http.middleware import setup_http_middlewares
from src.shared.logging import setup_logging
from src.tenancy.api.routes import tenant_scope_router, tenants_router

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None, container: Optional[AppContainer] = None) -> FastAPI:
    """
    Build the API. A prebuilt ``container`` (tests) skips the database
    bootstrap; otherwise the lifespan connects on startup and closes every
    pool on shutdown.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.container is None:
            app.state.container = await build_container(settings)
        logger.info("MultiCRM backend started", port=settings.SERVER_PORT, environment=settings.ENVIRONMENT)
        try:
            yield
        finally:
            logger.info("Shutting down gracefully")
            await app.state.container.close()

    app = FastAPI(
        title="MultiCRM Backend API",
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.settings = settings

    setup_http_middlewares(app, settings)

    # Routers
    app.include_router(health_router)
    app.include_router(tenants_router)
    app.include_router(tenant_scope_router)

    # Centralized error handling → {success: false, error, code, details?, correlation_id?}
    register_exception_handlers(app)

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            "message": "MultiCRM Backend is running",
            "docs": "/docs",
            "health": "/health",
        }

    return app
