"""Sign in with Apple identity token verifier.

Apple includes names only on a user's very first sign-in, and the email may
be a private relay address. Audience is checked only when a client ID is
configured.
"""

from src.core.constants import APPLE_ISSUER
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.enums import LoginType
from src.domain.protocols import LoggerProtocol
from src.domain.value_objects import SocialIdentity
from src.infrastructure.social.id_token_verifier import (
    IdTokenVerifier,
    coerce_bool,
    social_token_rejected,
)
from src.infrastructure.social.jwks_key_source import JwksKeySource


class AppleIdentityVerifier(IdTokenVerifier):
    """Verifies Apple identity tokens."""

    def __init__(
        self,
        *,
        key_source: JwksKeySource,
        logger: LoggerProtocol,
        client_id: str | None = None,
    ) -> None:
        super().__init__(
            login_type=LoginType.APPLE,
            key_source=key_source,
            issuers=(APPLE_ISSUER,),
            logger=logger,
        )
        self._client_id = client_id

    async def verify(self, assertion: str) -> Result[SocialIdentity, AuthenticationError]:
        audience = [self._client_id] if self._client_id else None
        claims_result = await self._verify_id_token(assertion, audience=audience)
        if isinstance(claims_result, Failure):
            return claims_result
        claims = claims_result.value

        email = claims.get("email")
        if not email:
            self._logger.info("social_token_missing_email", provider="apple")
            return Failure(error=social_token_rejected())

        try:
            identity = SocialIdentity(
                provider=LoginType.APPLE,
                provider_id=str(claims["sub"]),
                email=email,
                first_name=claims.get("given_name"),
                last_name=claims.get("family_name"),
                email_verified=coerce_bool(claims.get("email_verified", False)),
            )
        except ValueError:
            return Failure(error=social_token_rejected())
        return Success(value=identity)
