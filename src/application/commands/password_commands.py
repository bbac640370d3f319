"""Password lifecycle commands.

Two reset flows exist side by side:
- Forgot password: one-time code delivered by email or SMS (OTP engine)
- Reset token: emailed single-use link token (email accounts only)
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class ForgotPassword:
    """Send a forgot-password code to the user's email or phone."""

    email_or_phone: str


@dataclass(frozen=True, kw_only=True)
class ResetForgotPassword:
    """Set a new password with a forgot-password code."""

    code: str
    new_password: str


@dataclass(frozen=True, kw_only=True)
class RequestPasswordResetToken:
    """Email a password reset link."""

    email: str


@dataclass(frozen=True, kw_only=True)
class ValidatePasswordResetToken:
    """Check a reset link token without consuming it."""

    token: str


@dataclass(frozen=True, kw_only=True)
class ConfirmPasswordResetToken:
    """Set a new password with a reset link token."""

    token: str
    new_password: str


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change password of an authenticated user."""

    user_id: UUID
    old_password: str
    new_password: str


@dataclass(frozen=True, kw_only=True)
class GeneratePassword:
    """Set a first password on a social-only account."""

    user_id: UUID
    new_password: str
