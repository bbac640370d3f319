"""Password handlers for authenticated users.

ChangePasswordHandler: the old password must verify before the new hash is
stored. GeneratePasswordHandler: a social-only account sets its first
password, after which credentials login works too.
"""

from src.application.commands.password_commands import ChangePassword, GeneratePassword
from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    ValidationError,
    unexpected_error,
    user_not_found,
)
from src.core.result import Failure, Result, Success
from src.domain.protocols import LoggerProtocol, PasswordHashingProtocol, UserRepository


class ChangePasswordHandler:
    """Handler for ChangePassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._logger = logger

    async def handle(self, cmd: ChangePassword) -> Result[None, DomainError]:
        """Replace the password after checking the old one.

        Returns:
            Success(None) on change.
            Failure(ValidationError OLD_PASSWORD_MISMATCH) if the old password is wrong
            or the account has no password yet.
        """
        try:
            user = await self._user_repo.find_by_id(cmd.user_id)
            if user is None:
                return Failure(error=user_not_found())

            if not user.has_password() or not await self._password_service.verify_password_async(
                cmd.old_password, user.password_hash or ""
            ):
                self._logger.info("password_change_rejected", user_id=str(user.id))
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.OLD_PASSWORD_MISMATCH,
                        message="Old password does not match",
                        field="old_password",
                    )
                )

            user.set_password_hash(
                await self._password_service.hash_password_async(cmd.new_password)
            )
            await self._user_repo.update(user)

            self._logger.info("password_changed", user_id=str(user.id))
            return Success(value=None)

        except Exception as e:
            self._logger.error("password_change_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


class GeneratePasswordHandler:
    """Handler for GeneratePassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._logger = logger

    async def handle(self, cmd: GeneratePassword) -> Result[None, DomainError]:
        """Set the first password of a social-only account.

        Returns:
            Success(None) on success.
            Failure(ConflictError PASSWORD_ALREADY_SET) if a password exists.
        """
        try:
            user = await self._user_repo.find_by_id(cmd.user_id)
            if user is None:
                return Failure(error=user_not_found())

            if user.has_password():
                return Failure(
                    error=ConflictError(
                        code=ErrorCode.PASSWORD_ALREADY_SET,
                        message="Password already set. Use change password instead",
                        resource_type="User",
                        conflicting_field="password",
                    )
                )

            user.set_password_hash(
                await self._password_service.hash_password_async(cmd.new_password)
            )
            await self._user_repo.update(user)

            self._logger.info("password_generated", user_id=str(user.id))
            return Success(value=None)

        except Exception as e:
            self._logger.error("password_generate_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
