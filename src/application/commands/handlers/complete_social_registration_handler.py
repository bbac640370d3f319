"""Register-after-social handler.

A user provisioned through a social login completes their profile: names
and, optionally, a phone number. The phone must not belong to anyone else.
Changing the phone resets phone_verified and burns every phone verification
code still outstanding for the user.
"""

from src.application.commands.auth_commands import CompleteSocialRegistration
from src.application.commands.handlers.register_user_handler import contact_conflict
from src.application.dtos import UserProfile, to_user_profile
from src.application.services import OtpService
from src.core.errors import DomainError, unexpected_error, user_not_found
from src.core.result import Failure, Result, Success
from src.domain.enums import OtpPurpose
from src.domain.protocols import LoggerProtocol, UserAlreadyExistsError, UserRepository
from src.domain.validators import normalize_contact


class CompleteSocialRegistrationHandler:
    """Handler for CompleteSocialRegistration command."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._otp_service = otp_service
        self._logger = logger

    async def handle(
        self, cmd: CompleteSocialRegistration
    ) -> Result[UserProfile, DomainError]:
        """Update names and phone of the authenticated user.

        Returns:
            Success(UserProfile) with the updated profile.
            Failure(NotFoundError) if the user no longer exists.
            Failure(ConflictError PHONE_ALREADY_EXISTS) if the phone is taken.
        """
        try:
            user = await self._user_repo.find_by_id(cmd.user_id)
            if user is None:
                return Failure(error=user_not_found())

            phone_changed = False
            if cmd.phone is not None:
                phone = normalize_contact(cmd.phone)
                if phone != user.phone:
                    if await self._user_repo.exists_by_phone(phone):
                        return Failure(error=contact_conflict("phone"))
                    user.phone = phone
                    user.phone_verified = False
                    phone_changed = True

            user.first_name = cmd.first_name
            user.last_name = cmd.last_name
            user.touch()

            try:
                await self._user_repo.update(user)
            except UserAlreadyExistsError as e:
                return Failure(error=contact_conflict(e.field))

            if phone_changed:
                await self._otp_service.revoke(user.id, OtpPurpose.PHONE_VERIFICATION)

            self._logger.info(
                "social_registration_completed",
                user_id=str(user.id),
                phone_changed=phone_changed,
            )
            return Success(value=to_user_profile(user))

        except Exception as e:
            self._logger.error("social_registration_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
