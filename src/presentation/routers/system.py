"""System router for non-versioned application endpoints.

Provides root, health and configuration endpoints that are not part of the
versioned API contract. They are lightweight and side-effect free.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.core.config import get_settings
from src.core.container import get_database

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check."""
    settings = get_settings()
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy"}


@system_router.get("/health/ready")
async def readiness() -> JSONResponse:
    """Readiness check: the database answers a trivial query.

    Returns:
        200 when the database is reachable, 503 otherwise.
    """
    if await get_database().check_connection():
        return JSONResponse(content={"status": "ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unavailable"},
    )


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Configuration debug endpoint (development only).

    Returns:
        JSONResponse: Sanitized configuration, or 403 outside development.
    """
    settings = get_settings()
    if not settings.is_development:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
                "v1_prefix": settings.api_v1_prefix,
            },
            "database": {
                "url": "<redacted>",  # Never expose credentials
                "echo": settings.db_echo,
            },
            "tokens": {
                "access_minutes": settings.access_token_expire_minutes,
                "refresh_minutes": settings.refresh_token_expire_minutes,
            },
            "sweeps": {
                "enabled": settings.sweeps_enabled,
                "interval_seconds": settings.sweep_interval_seconds,
            },
            "cors": {"origins": settings.cors_origin_list},
        }
    )
