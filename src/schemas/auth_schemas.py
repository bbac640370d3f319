"""Authentication request/response schemas.

Pydantic models for API request validation and response serialization.
Kept separate from domain entities - these are HTTP-layer concerns.
Field validation reuses the Annotated types from src/domain/types.

Endpoints (prefix /api/v1/auth):
    POST /login                       - Credentials login
    POST /social-login                - Google / Apple / Facebook login
    POST /register                    - Create user
    POST /register/social             - Complete profile after social login
    POST /token/refresh               - Exchange expired access + refresh token
    POST /logout                      - End current session
    POST /password/forgot             - Send forgot-password code
    POST /password/forgot/reset       - Reset password with that code
    POST /password/reset-token        - Email a reset link
    GET  /password/reset-token/{t}    - Check a reset link
    POST /password/reset-token/confirm- Reset password with a link token
    POST /password/change             - Change password
    POST /password/generate           - First password for social accounts
    POST /otp                         - Send contact verification code
    POST /otp/verify                  - Verify contact
    GET  /me                          - Current user
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.application.dtos import AuthSession, IssuedOtp, UserProfile
from src.domain.enums import LoginType, OsType, OtpMedium, UserRole
from src.domain.types import (
    Email,
    EmailOrPhone,
    JwtToken,
    LoginPassword,
    OneTimeCode,
    Password,
    Phone,
)


# =============================================================================
# Device context
# =============================================================================


class DeviceInfo(BaseModel):
    """Optional client metadata stored on the session."""

    os: OsType | None = Field(default=None, description="Client operating system")
    device_id: str | None = Field(
        default=None, max_length=255, description="Stable device identifier"
    )
    latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    longitude: Decimal | None = Field(default=None, ge=-180, le=180)


# =============================================================================
# Login
# =============================================================================


class LoginRequest(DeviceInfo):
    """Request schema for credentials login.

    POST /api/v1/auth/login
    Returns: 200 OK
    """

    email_or_phone: EmailOrPhone
    password: LoginPassword

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email_or_phone": "a@b.com",
                "password": "Secret@123",
                "os": "ios",
                "device_id": "9f0c0a1e",
            }
        }
    )


class SocialLoginRequest(DeviceInfo):
    """Request schema for social login.

    POST /api/v1/auth/social-login
    """

    login_type: LoginType = Field(..., description="google, apple or facebook")
    token: str = Field(
        ...,
        min_length=16,
        max_length=8192,
        description="ID token (Google, Apple) or access token (Facebook)",
    )


class AuthTokensResponse(BaseModel):
    """Response schema for every login flow and for refresh."""

    user_id: UUID = Field(..., description="Authenticated user")
    access_token: str = Field(..., description="JWT access token")
    access_token_expires_at: datetime = Field(..., description="Access token expiry")
    refresh_token: str = Field(..., description="JWT refresh token")
    refresh_token_expires_at: datetime = Field(..., description="Refresh token expiry")
    token_type: str = Field(default="bearer", description="Authorization scheme")
    login_type: LoginType = Field(..., description="How the session was opened")
    is_new_user: bool = Field(
        default=False, description="True when a social login created the account"
    )

    @classmethod
    def from_auth_session(cls, auth_session: AuthSession) -> "AuthTokensResponse":
        tokens = auth_session.tokens
        return cls(
            user_id=auth_session.user_id,
            access_token=tokens.access_token,
            access_token_expires_at=tokens.access_token_expires_at,
            refresh_token=tokens.refresh_token,
            refresh_token_expires_at=tokens.refresh_token_expires_at,
            token_type=tokens.token_type,
            login_type=auth_session.login_type,
            is_new_user=auth_session.is_new_user,
        )


# =============================================================================
# Registration
# =============================================================================


class RegisterRequest(BaseModel):
    """Request schema for user creation (registration).

    POST /api/v1/auth/register
    Returns: 201 Created
    """

    email_or_phone: EmailOrPhone
    password: Password
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email_or_phone": "a@b.com", "password": "Secret@123"}
        }
    )


class RegisterResponse(BaseModel):
    """Response schema for user creation (201 Created)."""

    id: UUID = Field(..., description="Created user's ID")
    message: str = Field(default="Registration successful", description="Success message")


class CompleteSocialRegistrationRequest(BaseModel):
    """POST /api/v1/auth/register/social (bearer)."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Phone | None = None


class UserProfileResponse(BaseModel):
    """Public view of a user."""

    id: UUID
    email: str | None
    phone: str | None
    first_name: str | None
    last_name: str | None
    email_verified: bool
    phone_verified: bool
    role: UserRole
    has_password: bool
    avatar_url: str | None = None
    linked_providers: list[str] = Field(default_factory=list)

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            phone=profile.phone,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email_verified=profile.email_verified,
            phone_verified=profile.phone_verified,
            role=profile.role,
            has_password=profile.has_password,
            avatar_url=profile.avatar_url,
            linked_providers=list(profile.linked_providers),
        )


# =============================================================================
# Token refresh
# =============================================================================


class RefreshTokenRequest(BaseModel):
    """POST /api/v1/auth/token/refresh.

    The expired access token travels in the Authorization header.
    """

    refresh_token: JwtToken


# =============================================================================
# Passwords
# =============================================================================


class ForgotPasswordRequest(BaseModel):
    """POST /api/v1/auth/password/forgot."""

    email_or_phone: EmailOrPhone


class ResetForgotPasswordRequest(BaseModel):
    """POST /api/v1/auth/password/forgot/reset."""

    code: OneTimeCode
    new_password: Password


class PasswordResetTokenRequest(BaseModel):
    """POST /api/v1/auth/password/reset-token."""

    email: Email


class ConfirmPasswordResetTokenRequest(BaseModel):
    """POST /api/v1/auth/password/reset-token/confirm."""

    token: OneTimeCode
    new_password: Password


class PasswordResetTokenValidResponse(BaseModel):
    """GET /api/v1/auth/password/reset-token/{token}."""

    valid: bool = True


class ChangePasswordRequest(BaseModel):
    """POST /api/v1/auth/password/change (bearer)."""

    old_password: LoginPassword
    new_password: Password


class GeneratePasswordRequest(BaseModel):
    """POST /api/v1/auth/password/generate (bearer)."""

    new_password: Password


# =============================================================================
# One-time codes
# =============================================================================


class GenerateOtpRequest(BaseModel):
    """POST /api/v1/auth/otp (bearer)."""

    email_or_phone: EmailOrPhone


class VerifyOtpRequest(BaseModel):
    """POST /api/v1/auth/otp/verify (bearer)."""

    email_or_phone: EmailOrPhone
    code: OneTimeCode


class OtpSentResponse(BaseModel):
    """A code was sent. The code itself is never returned."""

    medium: OtpMedium = Field(..., description="email or sms")
    expires_at: datetime = Field(..., description="When the code stops working")
    message: str = Field(default="Code sent", description="Success message")

    @classmethod
    def from_issued(cls, issued: IssuedOtp) -> "OtpSentResponse":
        return cls(medium=issued.medium, expires_at=issued.expires_at)
