"""UserRepository protocol for user persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.
"""

from typing import Protocol
from uuid import UUID

from src.domain.entities.user import User


class UserAlreadyExistsError(Exception):
    """Raised by save() when a unique contact column is already taken.

    Attributes:
        field: "email" or "phone".
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"User with this {field} already exists")
        self.field = field


class UserRepository(Protocol):
    """User repository protocol (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.

    Lookups never return soft-deleted users.

    Methods:
        find_by_id: Retrieve user by ID
        find_by_email: Retrieve user by email (case-insensitive)
        find_by_phone: Retrieve user by E.164 phone
        save: Create new user
        update: Persist changes to an existing user
        soft_delete: Tombstone a user
        exists_by_email / exists_by_phone: Uniqueness checks
    """

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID.

        Args:
            user_id: User's unique identifier.

        Returns:
            User if found and not soft-deleted, None otherwise.
        """
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive)."""
        ...

    async def find_by_phone(self, phone: str) -> User | None:
        """Find user by phone number."""
        ...

    async def save(self, user: User) -> None:
        """Create new user.

        Raises:
            UserAlreadyExistsError: If email or phone is already taken (the
                unique constraint is the final arbiter under concurrent
                registration).
        """
        ...

    async def update(self, user: User) -> None:
        """Persist every mutable field of an existing user.

        Raises:
            UserAlreadyExistsError: If a changed email or phone is taken.
        """
        ...

    async def soft_delete(self, user_id: UUID) -> None:
        """Set deleted_at on the user."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether a live user holds the email."""
        ...

    async def exists_by_phone(self, phone: str) -> bool:
        """Check whether a live user holds the phone number."""
        ...
