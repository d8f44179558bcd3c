"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    check_database_health,
    close_database_connections,
)
from infrastructure.error_handlers import register_error_handlers
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_auth_settings, get_settings
from infrastructure.version import __version__
from notes.presentation import router as notes_router
from notes.presentation import stats_router as tenant_stats_router


@asynccontextmanager
async def notebase_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine disposal on shutdown (engines are created lazily)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    if get_auth_settings().uses_development_secret:
        probe.insecure_session_secret()
    probe.application_started(
        app_name=settings.app_name, version=__version__, debug=settings.debug
    )

    yield

    await close_database_connections()
    probe.application_stopped()


def create_app() -> FastAPI:
    """Build the FastAPI application with routers, middleware and handlers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant notes with invitations and plan limits",
        version=__version__,
        lifespan=notebase_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, debug=settings.debug)

    app.include_router(iam_router)
    app.include_router(tenant_stats_router)
    app.include_router(notes_router)

    @app.get("/")
    def root() -> dict:
        """Describe the API."""
        return {
            "message": settings.app_name,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "auth": "/auth/*",
                "notes": "/notes/*",
                "tenants": "/tenants/*",
                "users": "/users/*",
            },
        }

    @app.get("/health")
    def health() -> dict:
        """Basic health check endpoint."""
        return {"status": "ok"}

    @app.get("/health/db")
    async def health_db() -> JSONResponse:
        """Check that the database answers a trivial query."""
        healthy = await check_database_health()
        return JSONResponse(
            status_code=status.HTTP_200_OK
            if healthy
            else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "ok" if healthy else "unhealthy"},
        )

    return app


app = create_app()
