"""API tests for the /api/v1/auth endpoints.

Tests the complete HTTP request/response cycle with the real handlers and
security services. Persistence is replaced by in-memory repositories, mail
goes to a recording transport so codes and links can be read back, and the
session service gets a controllable clock so refresh can be exercised.

Tests cover:
- Register, login, current user, logout
- Token refresh after access expiry
- Forgot-password code and reset-link flows end to end
- Contact verification codes
- Error body shape for validation, auth and conflict failures
"""

import re
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from src.application.services import SessionService
from src.core.container import auth_handlers
from src.core.container import (
    get_logger,
    get_otp_repository,
    get_password_reset_token_repository,
    get_session_repository,
    get_session_service,
    get_token_digest,
    get_token_service,
    get_user_repository,
)
from src.main import app
from tests.utils.fakes import (
    FixedClock,
    InMemoryOtpRepository,
    InMemoryPasswordResetTokenRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
    RecordingTransport,
)

PASSWORD = "Secret@123"
NEW_PASSWORD = "NewSecret@456"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stores():
    return SimpleNamespace(
        users=InMemoryUserRepository(),
        sessions=InMemorySessionRepository(),
        otps=InMemoryOtpRepository(),
        reset_tokens=InMemoryPasswordResetTokenRepository(),
        clock=FixedClock(),
        mail=RecordingTransport(),
    )


@pytest.fixture(autouse=True)
def override_dependencies(stores, monkeypatch):
    """Swap persistence and mail delivery for in-memory fakes for every test."""

    def session_service():
        return SessionService(
            session_repo=stores.sessions,
            user_repo=stores.users,
            token_service=get_token_service(),
            token_digest=get_token_digest(),
            clock=stores.clock,
            logger=get_logger(),
        )

    app.dependency_overrides[get_user_repository] = lambda: stores.users
    app.dependency_overrides[get_session_repository] = lambda: stores.sessions
    app.dependency_overrides[get_otp_repository] = lambda: stores.otps
    app.dependency_overrides[get_password_reset_token_repository] = (
        lambda: stores.reset_tokens
    )
    app.dependency_overrides[get_session_service] = session_service
    monkeypatch.setattr(auth_handlers, "get_email_service", lambda: stores.mail)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create TestClient for API tests using real app."""
    return TestClient(app, raise_server_exceptions=False)


def register(client, contact="jane@example.com", password=PASSWORD):
    return client.post(
        "/api/v1/auth/register",
        json={"email_or_phone": contact, "password": password, "first_name": "Jane"},
    )


def login(client, contact="jane@example.com", password=PASSWORD):
    return client.post(
        "/api/v1/auth/login",
        json={"email_or_phone": contact, "password": password, "os": "ios"},
    )


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def body_fields(response):
    return [error["field"] for error in response.json()["errors"]]


def last_mail_to(mail, address):
    """Body of the newest message delivered to ``address``."""
    bodies = [body for to, _subject, body in mail.sent if to == address]
    return bodies[-1]


# =============================================================================
# Register / login / me / logout
# =============================================================================


@pytest.mark.api
class TestAccountLifecycle:
    def test_register_login_me_logout(self, client):
        # Register
        registered = register(client)
        assert registered.status_code == 201
        assert registered.json()["message"] == "Registration successful"
        user_id = registered.json()["id"]

        # Login
        logged_in = login(client)
        assert logged_in.status_code == 200
        tokens = logged_in.json()
        assert tokens["user_id"] == user_id
        assert tokens["token_type"] == "bearer"
        assert tokens["login_type"] == "credentials"
        assert tokens["is_new_user"] is False

        # Current user
        me = client.get("/api/v1/auth/me", headers=bearer(tokens["access_token"]))
        assert me.status_code == 200
        assert me.json()["email"] == "jane@example.com"
        assert me.json()["email_verified"] is False
        assert me.json()["has_password"] is True

        # Logout, then the same token no longer works
        out = client.post("/api/v1/auth/logout", headers=bearer(tokens["access_token"]))
        assert out.status_code == 200
        assert out.json() == {"message": "Successfully logged out."}

        after = client.get("/api/v1/auth/me", headers=bearer(tokens["access_token"]))
        assert after.status_code == 401
        assert after.json()["error_code"] == "session_not_found"

    def test_phone_registration_and_login(self, client):
        assert register(client, contact="+14155550100").status_code == 201

        response = login(client, contact="+14155550100")

        assert response.status_code == 200

    def test_duplicate_registration_is_conflict(self, client):
        register(client)

        response = register(client, contact="JANE@example.com")

        assert response.status_code == 409
        assert response.json()["error_code"] == "email_already_exists"

    def test_wrong_password_is_invalid_credentials(self, client):
        register(client)

        response = login(client, password="Wrong@12345")

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "invalid_credentials"
        assert body["message"] == "Invalid credentials"
        assert body["path"] == "/api/v1/auth/login"

    def test_missing_bearer_is_unauthorized(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error_code"] == "token_invalid"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_bearer_is_unauthorized(self, client):
        response = client.get("/api/v1/auth/me", headers=bearer("not-a-jwt"))

        assert response.status_code == 401


@pytest.mark.api
class TestRequestValidation:
    def test_malformed_contact_is_400_with_field_errors(self, client):
        response = register(client, contact="not-a-contact")

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "validation_failed"
        assert body["status_code"] == 400
        assert [error["field"] for error in body["errors"]] == ["email_or_phone"]
        assert "timestamp" in body

    def test_weak_password_is_400(self, client):
        response = register(client, password="weak")

        assert response.status_code == 400
        assert body_fields(response) == ["password"]

    def test_unknown_login_type_is_400(self, client):
        response = client.post(
            "/api/v1/auth/social-login", json={"login_type": "myspace", "token": "t"}
        )

        assert response.status_code == 400


# =============================================================================
# Token refresh
# =============================================================================


@pytest.mark.api
class TestTokenRefresh:
    def _refresh(self, client, tokens):
        return client.post(
            "/api/v1/auth/token/refresh",
            json={"refresh_token": tokens["refresh_token"]},
            headers=bearer(tokens["access_token"]),
        )

    def test_refresh_before_access_expiry_is_refused(self, client):
        register(client)
        tokens = login(client).json()

        response = self._refresh(client, tokens)

        assert response.status_code == 401
        assert response.json()["error_code"] == "access_token_not_expired"

    def test_refresh_rotates_both_tokens(self, client, stores):
        register(client)
        tokens = login(client).json()
        stores.clock.advance(minutes=61)

        response = self._refresh(client, tokens)

        assert response.status_code == 200
        rotated = response.json()
        assert rotated["access_token"] != tokens["access_token"]
        assert rotated["refresh_token"] != tokens["refresh_token"]
        assert self._refresh(client, tokens).status_code == 401

    def test_expired_refresh_token_is_forbidden(self, client, stores):
        register(client)
        tokens = login(client).json()
        stores.clock.advance(days=8)

        response = self._refresh(client, tokens)

        assert response.status_code == 403
        assert response.json()["error_code"] == "refresh_token_expired"
        assert stores.sessions.rows == {}

    def test_schema_documents_forbidden_for_expired_refresh(self, client):
        schema = client.get("/openapi.json").json()

        operation = schema["paths"]["/api/v1/auth/token/refresh"]["post"]

        assert {"401", "403", "409"} <= set(operation["responses"])
        assert "403" in operation["description"]


# =============================================================================
# Passwords
# =============================================================================


@pytest.mark.api
class TestForgotPasswordFlow:
    def test_code_resets_password_and_revokes_sessions(self, client, stores):
        # Arrange
        register(client)
        old_tokens = login(client).json()

        # Act: request a code and redeem it from the mailed link
        sent = client.post(
            "/api/v1/auth/password/forgot", json={"email_or_phone": "jane@example.com"}
        )
        assert sent.status_code == 200
        assert sent.json()["medium"] == "email"
        link = last_mail_to(stores.mail, "jane@example.com")
        code = re.search(r"/reset-password\?token=([0-9A-F]+)", link).group(1)

        reset = client.post(
            "/api/v1/auth/password/forgot/reset",
            json={"code": code, "new_password": NEW_PASSWORD},
        )

        # Assert
        assert reset.status_code == 200
        me = client.get("/api/v1/auth/me", headers=bearer(old_tokens["access_token"]))
        assert me.status_code == 401
        assert login(client).status_code == 400
        assert login(client, password=NEW_PASSWORD).status_code == 200

        reused = client.post(
            "/api/v1/auth/password/forgot/reset",
            json={"code": code, "new_password": "Other@12345"},
        )
        assert reused.status_code == 400
        assert reused.json()["message"] == "Invalid or expired password reset token"

    def test_unknown_contact_is_not_found(self, client):
        response = client.post(
            "/api/v1/auth/password/forgot", json={"email_or_phone": "ghost@example.com"}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "user_not_found"


@pytest.mark.api
class TestResetLinkFlow:
    def test_request_validate_confirm(self, client, stores):
        register(client)

        requested = client.post(
            "/api/v1/auth/password/reset-token", json={"email": "jane@example.com"}
        )
        assert requested.status_code == 201
        body = last_mail_to(stores.mail, "jane@example.com")
        token = re.search(r"/reset-password\?token=([0-9A-F]+)", body).group(1)

        valid = client.get(f"/api/v1/auth/password/reset-token/{token}")
        assert valid.status_code == 200
        assert valid.json() == {"valid": True}

        confirmed = client.post(
            "/api/v1/auth/password/reset-token/confirm",
            json={"token": token, "new_password": NEW_PASSWORD},
        )
        assert confirmed.status_code == 200

        used = client.get(f"/api/v1/auth/password/reset-token/{token}")
        assert used.status_code == 400
        assert used.json()["error_code"] == "reset_token_invalid"

    def test_unknown_and_used_tokens_get_the_same_response(self, client, stores):
        register(client)
        client.post("/api/v1/auth/password/reset-token", json={"email": "jane@example.com"})
        body = last_mail_to(stores.mail, "jane@example.com")
        token = re.search(r"/reset-password\?token=([0-9A-F]+)", body).group(1)
        client.post(
            "/api/v1/auth/password/reset-token/confirm",
            json={"token": token, "new_password": NEW_PASSWORD},
        )

        unknown = client.get("/api/v1/auth/password/reset-token/DEADBEEF")
        used = client.get(f"/api/v1/auth/password/reset-token/{token}")

        stable = ("status_code", "error_code", "message", "errors")
        assert unknown.status_code == used.status_code == 400
        assert [unknown.json()[key] for key in stable] == [used.json()[key] for key in stable]
        assert unknown.json()["error_code"] == "reset_token_invalid"
        assert unknown.json()["message"] == "Invalid or expired password reset token"


@pytest.mark.api
class TestAuthenticatedPasswordChanges:
    def test_change_password(self, client):
        register(client)
        tokens = login(client).json()

        response = client.post(
            "/api/v1/auth/password/change",
            json={"old_password": PASSWORD, "new_password": NEW_PASSWORD},
            headers=bearer(tokens["access_token"]),
        )

        assert response.status_code == 200
        assert login(client, password=NEW_PASSWORD).status_code == 200

    def test_change_with_wrong_old_password(self, client):
        register(client)
        tokens = login(client).json()

        response = client.post(
            "/api/v1/auth/password/change",
            json={"old_password": "Nope@12345", "new_password": NEW_PASSWORD},
            headers=bearer(tokens["access_token"]),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "old_password"

    def test_generate_when_password_exists_is_conflict(self, client):
        register(client)
        tokens = login(client).json()

        response = client.post(
            "/api/v1/auth/password/generate",
            json={"new_password": NEW_PASSWORD},
            headers=bearer(tokens["access_token"]),
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "password_already_set"


# =============================================================================
# Contact verification
# =============================================================================


@pytest.mark.api
class TestContactVerification:
    def test_email_verification(self, client, stores):
        register(client)
        headers = bearer(login(client).json()["access_token"])

        sent = client.post(
            "/api/v1/auth/otp", json={"email_or_phone": "jane@example.com"}, headers=headers
        )
        assert sent.status_code == 200
        assert sent.json()["message"] == "Code sent"
        body = last_mail_to(stores.mail, "jane@example.com")
        code = re.search(r"verification code is: ([0-9A-F]+)", body).group(1)

        verified = client.post(
            "/api/v1/auth/otp/verify",
            json={"email_or_phone": "jane@example.com", "code": code},
            headers=headers,
        )

        assert verified.status_code == 200
        assert verified.json()["email_verified"] is True

        again = client.post(
            "/api/v1/auth/otp", json={"email_or_phone": "jane@example.com"}, headers=headers
        )
        assert again.status_code == 409
        assert again.json()["error_code"] == "already_verified"

    def test_foreign_contact_is_rejected(self, client):
        register(client)
        headers = bearer(login(client).json()["access_token"])

        response = client.post(
            "/api/v1/auth/otp", json={"email_or_phone": "other@example.com"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_email_or_phone"

    def test_requires_authentication(self, client):
        response = client.post("/api/v1/auth/otp", json={"email_or_phone": "a@b.com"})

        assert response.status_code == 401
