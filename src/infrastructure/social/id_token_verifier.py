"""Shared verification of RS256 OpenID Connect ID tokens.

Used by the Google and Apple verifiers. Steps:
1. Read the unverified header for ``kid`` and ``alg``
2. Resolve ``kid`` through the provider's JWKS
3. Require the header ``alg`` to equal the key's published algorithm
4. Verify signature, expiry and (when configured) audience with PyJWT
5. Require an accepted issuer
"""

from collections.abc import Sequence
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.enums import LoginType
from src.domain.protocols import LoggerProtocol
from src.infrastructure.social.jwks_key_source import JwksKeySource


class IdTokenVerifier:
    """Base class for JWKS-backed ID token verifiers."""

    def __init__(
        self,
        *,
        login_type: LoginType,
        key_source: JwksKeySource,
        issuers: Sequence[str],
        logger: LoggerProtocol,
    ) -> None:
        self._login_type = login_type
        self._key_source = key_source
        self._issuers = tuple(issuers)
        self._logger = logger

    @property
    def login_type(self) -> LoginType:
        """Provider this verifier handles."""
        return self._login_type

    async def _verify_id_token(
        self, id_token: str, *, audience: Sequence[str] | None
    ) -> Result[dict[str, Any], AuthenticationError]:
        """Verify the token and return its claims.

        Args:
            id_token: Compact JWS from the client.
            audience: Accepted ``aud`` values, or None to skip the audience check.
        """
        provider = self._login_type.value
        try:
            header = jwt.get_unverified_header(id_token)
        except InvalidTokenError:
            self._logger.info("social_token_malformed", provider=provider)
            return Failure(error=social_token_rejected())

        kid = header.get("kid")
        if not kid:
            self._logger.info("social_token_missing_kid", provider=provider)
            return Failure(error=social_token_rejected())

        key_result = await self._key_source.get_key(kid)
        if isinstance(key_result, Failure):
            return key_result
        signing_key = key_result.value

        if header.get("alg") != signing_key.algorithm:
            self._logger.info(
                "social_token_alg_mismatch",
                provider=provider,
                alg=header.get("alg"),
                expected=signing_key.algorithm,
            )
            return Failure(error=social_token_rejected())

        try:
            claims: dict[str, Any] = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=[signing_key.algorithm],
                audience=list(audience) if audience is not None else None,
                options={
                    "verify_aud": audience is not None,
                    "require": ["iss", "sub", "exp"],
                },
            )
        except InvalidTokenError as e:
            self._logger.info(
                "social_token_rejected", provider=provider, reason=type(e).__name__
            )
            return Failure(error=social_token_rejected())

        if claims.get("iss") not in self._issuers:
            self._logger.info(
                "social_token_issuer_mismatch", provider=provider, iss=claims.get("iss")
            )
            return Failure(error=social_token_rejected())

        return Success(value=claims)


def social_token_rejected() -> AuthenticationError:
    """The single client-facing error for every rejected social assertion."""
    return AuthenticationError(
        code=ErrorCode.SOCIAL_TOKEN_INVALID,
        message="Invalid social login token",
    )


def coerce_bool(value: Any) -> bool:
    """Providers send booleans as JSON booleans or as "true"/"false" strings."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
