"""User domain entity.

Pure business logic, no framework dependencies.

A user is identified by an email, a phone number, or both. Accounts created
through a social provider start without a password and cannot use the
credentials login until one is generated. Users are never hard-deleted;
``deleted_at`` tombstones them.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import ContactKind, LoginType, UserRole


@dataclass(slots=True, kw_only=True)
class User:
    """User identity record.

    Business Rules:
        - At least one of email or phone is present
        - A missing password_hash means the account is social-only
        - Soft-deleted users (deleted_at set) cannot authenticate
        - A social provider ID, once linked, is not overwritten

    Attributes:
        id: Unique user identifier.
        email: Lowercased email, unique when present.
        phone: E.164 phone number, unique when present.
        password_hash: bcrypt hash, None for social-only accounts.
        first_name: Given name.
        last_name: Family name.
        email_verified: Whether control of the email was proven.
        phone_verified: Whether control of the phone was proven.
        role: Role embedded in access tokens.
        social_ids: Provider user IDs keyed by login type value.
        avatar_url: Profile picture reported by a social provider.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
        deleted_at: Tombstone timestamp, None while the account exists.

    Example:
        >>> user = User(id=uuid7(), email="a@b.com")
        >>> user.has_password()
        False
        >>> user.link_social_id(LoginType.GOOGLE, "1234")
        True
    """

    id: UUID
    email: str | None = None
    phone: str | None = None
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email_verified: bool = False
    phone_verified: bool = False
    role: UserRole = UserRole.USER
    social_ids: dict[str, str] = field(default_factory=dict)
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Enforce the contact invariant.

        Raises:
            ValueError: If neither email nor phone is set.
        """
        if not self.email and not self.phone:
            raise ValueError("User requires an email or a phone number")

    def is_active(self) -> bool:
        """True unless the user has been soft-deleted."""
        return self.deleted_at is None

    def has_password(self) -> bool:
        """True when credentials login is possible."""
        return bool(self.password_hash)

    def contact_for(self, kind: ContactKind) -> str | None:
        """Return the stored email or phone matching a contact kind."""
        if kind is ContactKind.EMAIL:
            return self.email
        if kind is ContactKind.PHONE:
            return self.phone
        return None

    def set_password_hash(self, password_hash: str) -> None:
        """Replace the stored password hash."""
        self.password_hash = password_hash
        self.touch()

    def mark_verified(self, kind: ContactKind) -> None:
        """Record that the user proved control of their email or phone."""
        if kind is ContactKind.EMAIL:
            self.email_verified = True
        elif kind is ContactKind.PHONE:
            self.phone_verified = True
        self.touch()

    def is_verified(self, kind: ContactKind) -> bool:
        """Verification state of the given contact."""
        if kind is ContactKind.EMAIL:
            return self.email_verified
        if kind is ContactKind.PHONE:
            return self.phone_verified
        return False

    def link_social_id(self, login_type: LoginType, provider_id: str) -> bool:
        """Link a provider user ID unless one is already linked.

        Returns:
            True if the link was added, False if the provider was already linked.
        """
        if login_type.value in self.social_ids:
            return False
        self.social_ids = {**self.social_ids, login_type.value: provider_id}
        self.touch()
        return True

    def touch(self) -> None:
        """Bump updated_at."""
        self.updated_at = datetime.now(UTC)
