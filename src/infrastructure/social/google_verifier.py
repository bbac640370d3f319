"""Google Sign-In ID token verifier."""

from src.core.constants import GOOGLE_ISSUERS
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


class GoogleIdentityVerifier(IdTokenVerifier):
    """Verifies Google ID tokens against the configured client IDs.

    One backend usually serves several Google clients (web, iOS, Android);
    a token minted for any of them is accepted.
    """

    def __init__(
        self,
        *,
        client_ids: list[str],
        key_source: JwksKeySource,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(
            login_type=LoginType.GOOGLE,
            key_source=key_source,
            issuers=GOOGLE_ISSUERS,
            logger=logger,
        )
        self._client_ids = client_ids

    async def verify(self, assertion: str) -> Result[SocialIdentity, AuthenticationError]:
        if not self._client_ids:
            self._logger.warning("google_client_ids_not_configured")
            return Failure(error=social_token_rejected())

        claims_result = await self._verify_id_token(assertion, audience=self._client_ids)
        if isinstance(claims_result, Failure):
            return claims_result
        claims = claims_result.value

        email = claims.get("email")
        if not email:
            self._logger.info("social_token_missing_email", provider="google")
            return Failure(error=social_token_rejected())

        try:
            identity = SocialIdentity(
                provider=LoginType.GOOGLE,
                provider_id=str(claims["sub"]),
                email=email,
                first_name=claims.get("given_name"),
                last_name=claims.get("family_name"),
                avatar_url=claims.get("picture"),
                email_verified=coerce_bool(claims.get("email_verified", False)),
            )
        except ValueError:
            return Failure(error=social_token_rejected())
        return Success(value=identity)
