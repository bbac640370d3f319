"""Core errors package.

Usage:
    from src.core.errors import DomainError, ValidationError, ConflictError
"""

from src.core.errors.common_errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
    unexpected_error,
    user_not_found,
)
from src.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "InternalError",
    "unexpected_error",
    "user_not_found",
]
