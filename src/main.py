"""
Main FastAPI application entry point.

Builds the application: CORS, exception handlers, the versioned API router
and the system endpoints. The lifespan starts the credential sweeps and
disposes of the database pool on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import get_settings
from src.core.container import get_database, get_job_scheduler, get_logger
from src.presentation.routers import system_router
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: create tables in development, start the sweep scheduler
    - Shutdown: stop the scheduler, close database connections

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    settings = get_settings()
    logger = get_logger()

    if settings.is_development:
        await get_database().create_all()

    scheduler = None
    if settings.sweeps_enabled and not settings.is_testing:
        scheduler = get_job_scheduler()
        scheduler.start()

    logger.info(
        "application_started",
        environment=settings.environment.value,
        sweeps_enabled=scheduler is not None,
    )

    yield

    if scheduler is not None:
        await scheduler.stop()
    await get_database().close()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication and credential-lifecycle API",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Standard error body for every failure
    register_exception_handlers(app)

    app.include_router(v1_router)
    app.include_router(system_router)

    return app


app = create_app()
