"""Base error type for Railway-Oriented Programming.

DomainError is the base class of every failure in the auth core. Errors
flow through the system as data inside `Failure`, never as raised
exceptions, and are turned into HTTP responses only at the presentation edge.

Architecture:
- Does NOT inherit from Exception (returned in Result, not raised)
- Dataclass inheritance for the taxonomy (see common_errors)
- `code` is the stable machine-readable identifier sent to clients

Usage:
    from src.core.errors import ValidationError
    from src.core.enums import ErrorCode

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message="Invalid credentials",
    ))
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message, safe to show to clients.
        details: Optional context for logs. Never sent to clients.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
