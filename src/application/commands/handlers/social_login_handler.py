"""Social login handler (Google, Apple, Facebook).

Flow:
1. login_received
2. Resolve the verifier for the login type (unsupported -> 400)
3. Verify the provider assertion (rejected -> 401)
4. identity_resolved
5. Find the user by verified email
   - found: link the provider id (and avatar) if not linked yet
   - not found: auto-provision with email_verified=True and no password
6. Issue tokens and persist the session (token_issued, session_persisted)

A social account has no password and cannot use credentials login until
one is generated.
"""

from dataclasses import replace
from typing import TYPE_CHECKING

from uuid_extensions import uuid7

from src.application.commands.auth_commands import SocialLogin
from src.application.commands.handlers.register_user_handler import contact_conflict
from src.application.dtos import AuthSession
from src.application.services import SessionService
from src.core.errors import DomainError, unexpected_error
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import UserRole
from src.domain.protocols import LoggerProtocol, UserAlreadyExistsError, UserRepository
from src.domain.value_objects import SocialIdentity

if TYPE_CHECKING:
    from src.infrastructure.social.registry import SocialVerifierRegistry


class SocialLoginHandler:
    """Handler for the social login command."""

    def __init__(
        self,
        registry: "SocialVerifierRegistry",  # Forward reference
        user_repo: UserRepository,
        session_service: SessionService,
        logger: LoggerProtocol,
    ) -> None:
        self._registry = registry
        self._user_repo = user_repo
        self._session_service = session_service
        self._logger = logger

    async def handle(self, cmd: SocialLogin) -> Result[AuthSession, DomainError]:
        """Handle social login.

        Returns:
            Success(AuthSession), with is_new_user=True when the account was provisioned.
            Failure(ValidationError) for an unsupported login type.
            Failure(AuthenticationError) when the provider assertion is rejected.
        """
        logger = self._logger.bind(login_type=cmd.login_type.value)
        logger.info("login_received")

        try:
            # Step 1: Resolve verifier
            verifier_result = self._registry.resolve(cmd.login_type)
            if isinstance(verifier_result, Failure):
                return verifier_result

            # Step 2: Verify assertion with the provider
            identity_result = await verifier_result.value.verify(cmd.token)
            if isinstance(identity_result, Failure):
                logger.info("login_rejected", reason="social_token_rejected")
                return identity_result
            identity = identity_result.value

            # Step 3: Link or provision
            user = await self._user_repo.find_by_email(identity.email)
            is_new_user = False
            if user is None:
                try:
                    user = await self._provision(identity)
                    is_new_user = True
                except UserAlreadyExistsError as e:
                    # Lost a race with a concurrent first login, or the email
                    # belongs to a soft-deleted account
                    user = await self._user_repo.find_by_email(identity.email)
                    if user is None:
                        logger.info("login_rejected", reason="email_unavailable")
                        return Failure(error=contact_conflict(e.field))
            elif self._link(user, identity):
                await self._user_repo.update(user)
                logger.info("social_id_linked", user_id=str(user.id))

            logger.info("identity_resolved", user_id=str(user.id), is_new_user=is_new_user)

            # Step 4: Issue tokens and persist the session
            session_result = await self._session_service.create(
                user, login_type=cmd.login_type, device=cmd.device
            )
            if isinstance(session_result, Failure) or not is_new_user:
                return session_result
            return Success(value=replace(session_result.value, is_new_user=True))

        except Exception as e:
            logger.error("social_login_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())

    async def _provision(self, identity: SocialIdentity) -> User:
        user = User(
            id=uuid7(),
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            email_verified=True,
            role=UserRole.USER,
            social_ids={identity.provider.value: identity.provider_id},
            avatar_url=identity.avatar_url,
        )
        await self._user_repo.save(user)
        self._logger.info(
            "social_user_provisioned",
            user_id=str(user.id),
            login_type=identity.provider.value,
        )
        return user

    @staticmethod
    def _link(user: User, identity: SocialIdentity) -> bool:
        """Apply provider data to an existing user. True if anything changed."""
        changed = user.link_social_id(identity.provider, identity.provider_id)
        if identity.avatar_url and not user.avatar_url:
            user.avatar_url = identity.avatar_url
            changed = True
        if identity.email_verified and not user.email_verified:
            user.email_verified = True
            changed = True
        return changed
