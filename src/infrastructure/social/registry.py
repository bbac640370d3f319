"""Static registry of social identity verifiers.

Built once at startup by the container. Adding a provider means adding a
verifier and one registry entry; no handler changes.
"""

from collections.abc import Iterable

from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import LoginType
from src.domain.protocols import SocialIdentityVerifier


class SocialVerifierRegistry:
    """Maps a login type to its verifier.

    Example:
        >>> registry = SocialVerifierRegistry([google, apple, facebook])
        >>> registry.supported_login_types()
        [<LoginType.GOOGLE: 'google'>, ...]
    """

    def __init__(self, verifiers: Iterable[SocialIdentityVerifier]) -> None:
        self._verifiers: dict[LoginType, SocialIdentityVerifier] = {}
        for verifier in verifiers:
            if verifier.login_type is LoginType.CREDENTIALS:
                msg = "Credentials login is not a social provider"
                raise ValueError(msg)
            if verifier.login_type in self._verifiers:
                msg = f"Duplicate verifier for {verifier.login_type.value}"
                raise ValueError(msg)
            self._verifiers[verifier.login_type] = verifier

    def resolve(
        self, login_type: LoginType
    ) -> Result[SocialIdentityVerifier, ValidationError]:
        """Look up the verifier for a login type.

        Returns:
            Failure(ValidationError UNSUPPORTED_LOGIN_TYPE) for unregistered
            types, including CREDENTIALS.
        """
        verifier = self._verifiers.get(login_type)
        if verifier is None:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.UNSUPPORTED_LOGIN_TYPE,
                    message="Unsupported login type",
                    field="login_type",
                )
            )
        return Success(value=verifier)

    def supported_login_types(self) -> list[LoginType]:
        """Registered login types in registration order."""
        return list(self._verifiers)
