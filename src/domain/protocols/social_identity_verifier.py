"""Social identity verifier port."""

from typing import Protocol

from src.core.errors import AuthenticationError
from src.core.result import Result
from src.domain.enums import LoginType
from src.domain.value_objects import SocialIdentity


class SocialIdentityVerifier(Protocol):
    """Exchanges a provider assertion for a verified identity.

    One implementation per provider (Google, Apple, Facebook). Every
    rejection, including provider outages, is an AuthenticationError.
    """

    @property
    def login_type(self) -> LoginType:
        """Provider this verifier handles."""
        ...

    async def verify(
        self, assertion: str
    ) -> Result[SocialIdentity, AuthenticationError]:
        """Verify an ID token / access token issued by the provider."""
        ...
