"""Error response builder for domain errors.

Maps each DomainError class to its HTTP status and renders the standard
error body (see src/schemas/common_schemas.ErrorResponse).

Exports:
    ErrorResponseBuilder: Builds JSON error responses
    DomainErrorHTTPException: HTTPException carrying a DomainError (raised by dependencies)
"""

from datetime import UTC, datetime

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from src.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from src.schemas.common_schemas import ErrorDetail, ErrorResponse

_STATUS_BY_ERROR_TYPE: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class DomainErrorHTTPException(HTTPException):
    """HTTPException that keeps the DomainError behind it.

    Dependencies raise it so failures before the route body still render
    with the error's own code.
    """

    def __init__(self, error: DomainError) -> None:
        status_code = ErrorResponseBuilder.status_code_for(error)
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if status_code == status.HTTP_401_UNAUTHORIZED
            else None
        )
        super().__init__(status_code=status_code, detail=error.message, headers=headers)
        self.error = error


class ErrorResponseBuilder:
    """Build standard error responses.

    Example:
        >>> error = ValidationError(
        ...     code=ErrorCode.INVALID_CREDENTIALS,
        ...     message="Invalid credentials",
        ... )
        >>> response = ErrorResponseBuilder.from_domain_error(error, request)
        >>> response.status_code
        400
    """

    @staticmethod
    def status_code_for(error: DomainError) -> int:
        """HTTP status of a domain error (500 for unknown kinds)."""
        for error_type, status_code in _STATUS_BY_ERROR_TYPE.items():
            if isinstance(error, error_type):
                return status_code
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert DomainError to JSON response.

        Args:
            error: Domain error returned by a handler
            request: FastAPI Request object (for the path)

        Returns:
            JSONResponse with ErrorResponse content
        """
        status_code = ErrorResponseBuilder.status_code_for(error)

        errors: list[ErrorDetail] = []
        if isinstance(error, ValidationError) and error.field:
            errors.append(
                ErrorDetail(field=error.field, code=error.code.value, message=error.message)
            )

        headers: dict[str, str] = {}
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers["WWW-Authenticate"] = "Bearer"
        if isinstance(error, ConflictError) and error.retryable:
            headers["Retry-After"] = "1"

        return ErrorResponseBuilder.build(
            request,
            status_code=status_code,
            error_code=error.code.value,
            message=error.message,
            errors=errors,
            headers=headers or None,
        )

    @staticmethod
    def build(
        request: Request,
        *,
        status_code: int,
        error_code: str,
        message: str,
        errors: list[ErrorDetail] | None = None,
        headers: dict[str, str] | None = None,
    ) -> JSONResponse:
        """Render the error body."""
        body = ErrorResponse(
            status_code=status_code,
            error_code=error_code,
            message=message,
            errors=errors or [],
            timestamp=datetime.now(UTC),
            path=str(request.url.path),
        )
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(mode="json"),
            headers=headers,
        )
