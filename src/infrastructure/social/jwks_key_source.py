"""Published signing keys (JWKS) with a TTL cache.

Keys are fetched with httpx and parsed with PyJWT. A ``kid`` missing from a
fresh cache triggers exactly one refetch, which covers provider key
rotation without letting forged ``kid`` values hammer the endpoint more
than once per request.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

import httpx
import jwt
from jwt.exceptions import PyJWTError

from src.core.constants import RESPONSE_BODY_MAX_LENGTH, SOCIAL_HTTP_TIMEOUT_DEFAULT
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.protocols import LoggerProtocol


@dataclass(frozen=True, slots=True)
class SigningKey:
    """Verification key and the algorithm it is published for."""

    key_id: str
    key: Any
    algorithm: str


class JwksKeySource:
    """Resolves ``kid`` to a verification key from a JWKS endpoint.

    Attributes:
        url: JWKS endpoint.
    """

    def __init__(
        self,
        *,
        url: str,
        provider_name: str,
        logger: LoggerProtocol,
        ttl_seconds: int = 3600,
        timeout: float = SOCIAL_HTTP_TIMEOUT_DEFAULT,
    ) -> None:
        self.url = url
        self._provider_name = provider_name
        self._logger = logger
        self._ttl_seconds = ttl_seconds
        self._timeout = timeout
        self._keys: dict[str, SigningKey] = {}
        self._fetched_at: float | None = None
        self._lock = asyncio.Lock()

    async def get_key(self, kid: str) -> Result[SigningKey, AuthenticationError]:
        """Return the key for ``kid``, refreshing the cache when needed."""
        if self._is_stale():
            refreshed = await self._refresh()
            if isinstance(refreshed, Failure):
                return refreshed
        elif kid not in self._keys:
            # Unknown kid on a warm cache: the provider may have rotated keys.
            refreshed = await self._refresh()
            if isinstance(refreshed, Failure):
                return refreshed

        key = self._keys.get(kid)
        if key is None:
            self._logger.warning(
                "jwks_unknown_kid", provider=self._provider_name, kid=kid
            )
            return Failure(error=_rejected(f"Unknown {self._provider_name} signing key"))
        return Success(value=key)

    def _is_stale(self) -> bool:
        return (
            self._fetched_at is None
            or time.monotonic() - self._fetched_at >= self._ttl_seconds
        )

    async def _refresh(self) -> Result[None, AuthenticationError]:
        async with self._lock:
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self.url)
            except httpx.HTTPError as e:
                self._logger.warning(
                    "jwks_fetch_failed", provider=self._provider_name, error=str(e)
                )
                return Failure(error=_rejected(f"{self._provider_name} keys unavailable"))

            if response.status_code != 200:
                self._logger.warning(
                    "jwks_fetch_rejected",
                    provider=self._provider_name,
                    status_code=response.status_code,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
                return Failure(error=_rejected(f"{self._provider_name} keys unavailable"))

            try:
                self._keys = _parse_keys(response.json())
            except (ValueError, KeyError, TypeError, PyJWTError) as e:
                self._logger.warning(
                    "jwks_parse_failed", provider=self._provider_name, error=str(e)
                )
                return Failure(error=_rejected(f"{self._provider_name} keys unavailable"))

            self._fetched_at = time.monotonic()
            self._logger.debug(
                "jwks_refreshed", provider=self._provider_name, key_count=len(self._keys)
            )
            return Success(value=None)


def _parse_keys(document: dict[str, Any]) -> dict[str, SigningKey]:
    keys: dict[str, SigningKey] = {}
    for jwk in document["keys"]:
        if "kid" not in jwk:
            continue
        # RSA keys published without "alg" are RS256 keys
        algorithm = jwk.get("alg") or "RS256"
        keys[jwk["kid"]] = SigningKey(
            key_id=jwk["kid"],
            key=jwt.PyJWK(jwk, algorithm=algorithm).key,
            algorithm=algorithm,
        )
    return keys


def _rejected(message: str) -> AuthenticationError:
    return AuthenticationError(code=ErrorCode.SOCIAL_TOKEN_INVALID, message=message)
