"""Common schemas used across multiple API endpoints.

Provides the standard error body and the plain message response.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement for operations without a resource to return."""

    message: str = Field(..., description="Human-readable result")


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Used for validation errors where multiple fields may have errors.

    Attributes:
        field: Name of the field with error
        code: Machine-readable error code
        message: Human-readable error message

    Examples:
        >>> error = ErrorDetail(
        ...     field="email_or_phone",
        ...     code="invalid_email_or_phone",
        ...     message="Invalid email or phone format",
        ... )
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Body of every failed request.

    Never carries stack traces or third-party response bodies.

    Attributes:
        status_code: HTTP status code for this occurrence
        error_code: Stable machine-readable code
        message: Human-readable explanation
        errors: Field-level errors (validation failures), empty otherwise
        timestamp: When the error was produced (UTC)
        path: Request path

    Examples:
        >>> ErrorResponse(
        ...     status_code=401,
        ...     error_code="access_token_not_expired",
        ...     message="Previous access-token is yet to expire",
        ...     timestamp=datetime.now(UTC),
        ...     path="/api/v1/auth/token/refresh",
        ... )
    """

    status_code: int = Field(..., description="HTTP status code")
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    errors: list[ErrorDetail] = Field(default_factory=list, description="Field errors")
    timestamp: datetime = Field(..., description="Time of the error (UTC)")
    path: str = Field(..., description="Request path")
