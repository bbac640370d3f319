"""API tests for non-versioned system routes.

Validates behavior of root, health, readiness and config endpoints exposed
by the system router.
"""

import pytest
from fastapi.testclient import TestClient

from src.core.config import get_settings
from src.main import app
from src.presentation.routers import system

client = TestClient(app)


class StubDatabase:
    def __init__(self, reachable: bool) -> None:
        self.reachable = reachable

    async def check_connection(self) -> bool:
        return self.reachable


def test_root_endpoint_returns_status_and_version() -> None:
    """Root endpoint should return operational status and app version."""
    settings = get_settings()

    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


def test_health_endpoint_returns_healthy_status() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.parametrize(
    ("reachable", "status_code", "body"),
    [
        (True, 200, {"status": "ready"}),
        (False, 503, {"status": "unavailable"}),
    ],
)
def test_readiness_follows_database(monkeypatch, reachable, status_code, body) -> None:
    monkeypatch.setattr(system, "get_database", lambda: StubDatabase(reachable))

    response = client.get("/health/ready")

    assert response.status_code == status_code
    assert response.json() == body


def test_config_endpoint_is_development_only() -> None:
    """Tests run outside development, so the endpoint refuses."""
    response = client.get("/config")

    assert response.status_code == 403
    assert response.json()["detail"] == "Config endpoint only available in development"


def test_unknown_route_uses_error_body() -> None:
    response = client.get("/api/v1/auth/nope")

    assert response.status_code == 404
    assert response.json()["status_code"] == 404
