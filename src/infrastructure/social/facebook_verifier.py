"""Facebook access token verifier (Graph API profile lookup).

Facebook Login hands the client an opaque user access token, so the only
way to validate it is to call the Graph API with it. A token that Graph
accepts yields the profile; anything else is a rejection.
"""

from typing import Any

import httpx

from src.core.constants import (
    FACEBOOK_PROFILE_FIELDS,
    RESPONSE_BODY_MAX_LENGTH,
    SOCIAL_HTTP_TIMEOUT_DEFAULT,
)
from src.core.errors import AuthenticationError
from src.core.result import Failure, Result, Success
from src.domain.enums import LoginType
from src.domain.protocols import LoggerProtocol
from src.domain.value_objects import SocialIdentity
from src.infrastructure.social.id_token_verifier import social_token_rejected


class FacebookIdentityVerifier:
    """Resolves a Facebook access token to the user's profile."""

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        graph_url: str = "https://graph.facebook.com",
        timeout: float = SOCIAL_HTTP_TIMEOUT_DEFAULT,
    ) -> None:
        self._logger = logger
        self._profile_url = f"{graph_url.rstrip('/')}/me"
        self._timeout = timeout

    @property
    def login_type(self) -> LoginType:
        """Provider this verifier handles."""
        return LoginType.FACEBOOK

    async def verify(self, assertion: str) -> Result[SocialIdentity, AuthenticationError]:
        """Fetch ``/me`` with the token and build the identity.

        Returns:
            Failure(AuthenticationError) on non-200, transport failure, or a
            profile without id or email.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    self._profile_url,
                    params={"fields": FACEBOOK_PROFILE_FIELDS, "access_token": assertion},
                )
        except httpx.TimeoutException as e:
            self._logger.warning("facebook_api_timeout", error=str(e))
            return Failure(error=social_token_rejected())
        except httpx.RequestError as e:
            self._logger.warning("facebook_api_connection_error", error=str(e))
            return Failure(error=social_token_rejected())

        if response.status_code != 200:
            self._logger.info(
                "social_token_rejected",
                provider="facebook",
                status_code=response.status_code,
                response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
            )
            return Failure(error=social_token_rejected())

        try:
            profile: dict[str, Any] = response.json()
        except ValueError:
            self._logger.warning("facebook_api_invalid_json")
            return Failure(error=social_token_rejected())

        if not isinstance(profile, dict) or not profile.get("id") or not profile.get("email"):
            self._logger.info("social_profile_incomplete", provider="facebook")
            return Failure(error=social_token_rejected())

        try:
            identity = SocialIdentity(
                provider=LoginType.FACEBOOK,
                provider_id=str(profile["id"]),
                email=profile["email"],
                first_name=profile.get("first_name"),
                last_name=profile.get("last_name"),
                avatar_url=_picture_url(profile),
            )
        except ValueError:
            return Failure(error=social_token_rejected())
        return Success(value=identity)


def _picture_url(profile: dict[str, Any]) -> str | None:
    # Graph nests the URL: {"picture": {"data": {"url": ...}}}
    picture = profile.get("picture")
    if isinstance(picture, dict):
        data = picture.get("data")
        if isinstance(data, dict):
            return data.get("url")
    return None
