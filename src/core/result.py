"""Result types for railway-oriented programming.

Handlers, services and adapters in the auth core return a Result instead of
raising. A failure carries a DomainError subclass, which the presentation
layer maps to an HTTP status and a stable error code.

Usage:
    async def find_user(user_id: UUID) -> Result[User, DomainError]:
        user = await repo.find_by_id(user_id)
        if user is None:
            return Failure(error=NotFoundError(...))
        return Success(value=user)

    match await find_user(user_id):
        case Success(value=user):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error describing the failure.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
