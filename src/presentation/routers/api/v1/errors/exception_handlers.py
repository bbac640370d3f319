"""Global exception handlers for FastAPI application.

Every failure leaves the API in the same body shape (ErrorResponse):
``{status_code, error_code, message, errors, timestamp, path}``.

Handlers:
    http_exception_handler: Converts HTTPException (auth dependencies, 404/405)
    validation_exception_handler: Converts RequestValidationError to 400 with field errors
    generic_exception_handler: Catches all unhandled exceptions

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.container import get_logger
from src.presentation.routers.api.v1.errors.error_response_builder import (
    DomainErrorHTTPException,
    ErrorResponseBuilder,
)
from src.schemas.common_schemas import ErrorDetail

# HTTP status code to error_code for HTTPExceptions raised without a DomainError
_HTTP_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    415: "unsupported_media_type",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def _get_error_code(status_code: int) -> str:
    """Get snake_case error code for an HTTP status."""
    return _HTTP_STATUS_CODES.get(status_code, "error")


async def http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert HTTPException to the standard error body.

    Exceptions carrying a DomainError keep its code; plain HTTPExceptions
    (unknown routes, wrong methods) get a code derived from the status.

    Args:
        request: FastAPI Request object.
        exc: HTTPException raised by handler or dependency.

    Returns:
        JSONResponse with ErrorResponse content.
    """
    # Type narrowing: registered for the Starlette base class
    assert isinstance(exc, StarletteHTTPException)

    if isinstance(exc, DomainErrorHTTPException):
        return ErrorResponseBuilder.from_domain_error(exc.error, request)

    # Preserve any headers from HTTPException (e.g., WWW-Authenticate)
    return ErrorResponseBuilder.build(
        request,
        status_code=exc.status_code,
        error_code=_get_error_code(exc.status_code),
        message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert RequestValidationError to a 400 response with field errors.

    Example:
        >>> # POST /api/v1/auth/register with {"email_or_phone": "nope", ...}
        >>> # {
        >>> #   "status_code": 400,
        >>> #   "error_code": "validation_failed",
        >>> #   "message": "Request validation failed",
        >>> #   "errors": [{"field": "email_or_phone", "code": "value_error", ...}],
        >>> #   ...
        >>> # }
    """
    # Type narrowing: FastAPI registers this handler only for RequestValidationError
    assert isinstance(exc, RequestValidationError)

    field_errors: list[ErrorDetail] = []
    for error in exc.errors():
        # Extract field path (e.g., ["body", "email"] -> "email")
        loc = error.get("loc", [])
        field_parts = [str(p) for p in loc if p != "body"]
        field_name = ".".join(field_parts) if field_parts else "unknown"

        field_errors.append(
            ErrorDetail(
                field=field_name,
                code=error.get("type", "validation_error"),
                message=error.get("msg", "Validation failed"),
            )
        )

    return ErrorResponseBuilder.build(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        error_code="validation_failed",
        message="Request validation failed",
        errors=field_errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected Python exceptions.

    Logs the exception and answers 500 without leaking details to the client.
    """
    get_logger().error(
        "unhandled_exception",
        error=exc,
        request_path=request.url.path,
        request_method=request.method,
    )

    return ErrorResponseBuilder.build(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="unexpected_error",
        message="An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> register_exception_handlers(app)
    """
    # Handle HTTPException (auth dependencies, unknown routes, wrong methods)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Handle Pydantic validation errors with field errors
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Catch-all for 500 errors
    app.add_exception_handler(Exception, generic_exception_handler)
