"""Application DTOs returned by handlers."""

from src.application.dtos.auth_dtos import (
    AuthenticatedUser,
    AuthSession,
    AuthTokens,
    IssuedOtp,
    UserProfile,
    to_user_profile,
)

__all__ = [
    "AuthenticatedUser",
    "AuthSession",
    "AuthTokens",
    "IssuedOtp",
    "UserProfile",
    "to_user_profile",
]
