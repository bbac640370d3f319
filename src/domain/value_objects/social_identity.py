"""Normalized identity asserted by a social provider."""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from src.domain.enums import LoginType


@dataclass(frozen=True, slots=True, kw_only=True)
class SocialIdentity:
    """Identity returned by every social verifier, whatever the provider.

    Attributes:
        provider: Login type of the provider that vouched for the identity.
        provider_id: The provider's stable user identifier (``sub`` / ``id``).
        email: Verified email address, normalized to lowercase.
        first_name: Given name, if the provider shared it.
        last_name: Family name, if the provider shared it.
        avatar_url: Profile picture URL, if any.
        email_verified: Whether the provider asserted email ownership.

    Raises:
        ValueError: If provider_id is empty or the email is malformed.
    """

    provider: LoginType
    provider_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    email_verified: bool = True

    def __post_init__(self) -> None:
        """Validate and normalize the asserted email."""
        if not self.provider_id:
            raise ValueError("Social identity requires a provider user id")
        try:
            validated = validate_email(self.email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email: {e}") from e
        object.__setattr__(self, "email", validated.normalized.lower())
