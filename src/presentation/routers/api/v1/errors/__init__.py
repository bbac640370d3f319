"""Error responses and exception handlers for the presentation layer.

Exports:
    DomainErrorHTTPException: HTTPException carrying a DomainError
    ErrorResponseBuilder: Utility for building error responses
    register_exception_handlers: Register global exception handlers with FastAPI
"""

from src.presentation.routers.api.v1.errors.error_response_builder import (
    DomainErrorHTTPException,
    ErrorResponseBuilder,
)
from src.presentation.routers.api.v1.errors.exception_handlers import (
    register_exception_handlers,
)

__all__ = [
    "DomainErrorHTTPException",
    "ErrorResponseBuilder",
    "register_exception_handlers",
]
