"""Error taxonomy shared by every layer.

Each class corresponds to one client-visible failure category. The
presentation layer maps the class to an HTTP status:

- ValidationError: 400, malformed input, wrong password, wrong OTP, rate limit
- AuthenticationError: 401, missing/invalid/expired access token
- AuthorizationError: 403, expired refresh token, role not permitted
- NotFoundError: 404, referenced resource absent
- ConflictError: 409, duplicate resource or lost concurrent update
- InternalError: 500, signing or persistence fault, anything unexpected

Usage:
    from src.core.errors import ValidationError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_EMAIL_OR_PHONE,
        message="Invalid email or phone format",
        field="email_or_phone",
    ))
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Bad request. The client should not retry unmodified.

    Attributes:
        field: Request field that failed validation, if any.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Referenced resource does not exist.

    Attributes:
        resource_type: Kind of resource (User, PasswordResetToken, ...).
        resource_id: Identifier that was looked up, if safe to expose.
    """

    resource_type: str
    resource_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate, already in target state, lost race).

    Attributes:
        resource_type: Kind of resource in conflict.
        conflicting_field: Field that conflicts (email, phone, ...).
        retryable: True when repeating the same request may succeed.
    """

    resource_type: str
    conflicting_field: str | None = None
    retryable: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Caller is not authenticated (token missing, invalid or expired)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Caller is authenticated but not allowed.

    Attributes:
        required_permission: Role or permission that was required.
    """

    required_permission: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InternalError(DomainError):
    """Unexpected failure. Message is generic, details stay in logs."""

    pass


def unexpected_error() -> InternalError:
    """Generic 500 returned when a handler catches an unexpected exception."""
    return InternalError(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred",
    )


def user_not_found() -> NotFoundError:
    """NotFound for a user id that no longer resolves."""
    return NotFoundError(
        code=ErrorCode.USER_NOT_FOUND,
        message="User not found",
        resource_type="User",
    )
