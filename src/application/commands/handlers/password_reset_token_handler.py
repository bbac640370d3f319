"""Reset-link flow over the Password Reset Token record (email accounts).

Request: find the user by email (NotFound otherwise), generate an 8-char
uppercase hex token, email ``{FE_BASE_URL}/reset-password?token=<token>``,
then store the token digest with a 30 minute expiry. Nothing is stored when
the mail cannot be sent.

Validate: unknown, expired and used tokens all fail with the same 400 so the
response does not reveal which tokens exist. The reason is only logged.
The presented token is trimmed and uppercased before hashing, matching the
uppercase hex the generator produces.

Confirm: validate, mark used (conditional), store the new password hash,
end every session of the user.
"""

from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from uuid_extensions import uuid7

from src.application.commands.password_commands import (
    ConfirmPasswordResetToken,
    RequestPasswordResetToken,
    ValidatePasswordResetToken,
)
from src.application.services import SessionService
from src.application.services.message_templates import password_reset_link_message
from src.core.enums import ErrorCode
from src.core.errors import (
    DomainError,
    ValidationError,
    unexpected_error,
    user_not_found,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import PasswordResetToken
from src.domain.protocols import (
    ClockProtocol,
    EmailServiceProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    PasswordResetTokenRepository,
    TokenDigestProtocol,
    UserRepository,
)

if TYPE_CHECKING:
    from src.infrastructure.security.one_time_secret_generator import (
        OneTimeSecretGenerator,
    )


class PasswordResetTokenError:
    """Client-facing messages of the reset-link flow."""

    INVALID = "Invalid or expired password reset token"
    DELIVERY_FAILED = "Failed to send password reset email. Please try again"


class RequestPasswordResetTokenHandler:
    """Email a single-use password reset link."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: PasswordResetTokenRepository,
        email_service: EmailServiceProtocol,
        secret_generator: "OneTimeSecretGenerator",  # Forward reference
        token_digest: TokenDigestProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        fe_base_url: str,
        valid_minutes: int = 30,
    ) -> None:
        self._user_repo = user_repo
        self._token_repo = token_repo
        self._email_service = email_service
        self._secret_generator = secret_generator
        self._token_digest = token_digest
        self._clock = clock
        self._logger = logger
        self._fe_base_url = fe_base_url.rstrip("/")
        self._valid_minutes = valid_minutes

    async def handle(self, cmd: RequestPasswordResetToken) -> Result[UUID, DomainError]:
        """Handle reset-link request.

        Returns:
            Success(token_id) once the mail is sent.
            Failure(NotFoundError) for an unknown email.
            Failure(ValidationError OTP_DELIVERY_FAILED) if the mail could not be sent.
        """
        try:
            user = await self._user_repo.find_by_email(cmd.email)
            if user is None or user.email is None:
                return Failure(error=user_not_found())

            token = self._secret_generator.generate_reset_token()
            reset_url = f"{self._fe_base_url}/reset-password?token={token}"
            message = password_reset_link_message(
                reset_url, user.first_name, self._valid_minutes
            )

            delivery = await self._email_service.send_email(
                user.email, message.subject, message.body
            )
            if isinstance(delivery, Failure):
                self._logger.warning(
                    "password_reset_mail_failed",
                    user_id=str(user.id),
                    error_code=delivery.error.code.value,
                )
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.OTP_DELIVERY_FAILED,
                        message=PasswordResetTokenError.DELIVERY_FAILED,
                    )
                )

            now = self._clock.now()
            reset_token = PasswordResetToken(
                id=uuid7(),
                user_id=user.id,
                token_hash=self._token_digest.digest(token),
                expires_at=now + timedelta(minutes=self._valid_minutes),
                created_at=now,
            )
            await self._token_repo.save(reset_token)

            self._logger.info(
                "password_reset_token_issued",
                user_id=str(user.id),
                token_id=str(reset_token.id),
                message_id=delivery.value,
            )
            return Success(value=reset_token.id)

        except Exception as e:
            self._logger.error("password_reset_request_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


class _ResetTokenLookup:
    """Shared lookup and state checks of a presented reset token."""

    def __init__(
        self,
        token_repo: PasswordResetTokenRepository,
        token_digest: TokenDigestProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._token_repo = token_repo
        self._token_digest = token_digest
        self._clock = clock
        self._logger = logger

    async def find_usable(self, token: str) -> Result[PasswordResetToken, ValidationError]:
        reset_token = await self._token_repo.find_by_hash(
            self._token_digest.digest(token.strip().upper())
        )
        if reset_token is None:
            reason = "unknown"
        elif reset_token.is_expired(self._clock.now()):
            reason = "expired"
        elif reset_token.is_used:
            reason = "used"
        else:
            return Success(value=reset_token)

        self._logger.info(
            "password_reset_token_rejected",
            reason=reason,
            token_id=str(reset_token.id) if reset_token else None,
        )
        return Failure(error=invalid_reset_token())


class ValidatePasswordResetTokenHandler:
    """Check a reset link without consuming it."""

    def __init__(
        self,
        token_repo: PasswordResetTokenRepository,
        token_digest: TokenDigestProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._lookup = _ResetTokenLookup(token_repo, token_digest, clock, logger)
        self._logger = logger

    async def handle(self, cmd: ValidatePasswordResetToken) -> Result[bool, DomainError]:
        try:
            result = await self._lookup.find_usable(cmd.token)
            if isinstance(result, Failure):
                return result
            return Success(value=True)
        except Exception as e:
            self._logger.error("password_reset_validate_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


class ConfirmPasswordResetTokenHandler:
    """Set a new password with a reset link token."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: PasswordResetTokenRepository,
        password_service: PasswordHashingProtocol,
        session_service: SessionService,
        token_digest: TokenDigestProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._token_repo = token_repo
        self._password_service = password_service
        self._session_service = session_service
        self._lookup = _ResetTokenLookup(token_repo, token_digest, clock, logger)
        self._logger = logger

    async def handle(self, cmd: ConfirmPasswordResetToken) -> Result[UUID, DomainError]:
        """Consume the token and replace the password.

        Returns:
            Success(user_id) after the password changed and sessions ended.
            Failure(ValidationError RESET_TOKEN_INVALID) for unknown, expired or
            used tokens.
        """
        try:
            # Step 1: Validate token state
            lookup_result = await self._lookup.find_usable(cmd.token)
            if isinstance(lookup_result, Failure):
                return lookup_result
            reset_token = lookup_result.value

            # Step 2: Single use, a concurrent confirm loses here
            if not await self._token_repo.mark_used(reset_token.id):
                self._logger.info(
                    "password_reset_token_rejected",
                    reason="used",
                    token_id=str(reset_token.id),
                )
                return Failure(error=invalid_reset_token())

            # Step 3: Store new password
            user = await self._user_repo.find_by_id(reset_token.user_id)
            if user is None:
                return Failure(error=user_not_found())
            user.set_password_hash(
                await self._password_service.hash_password_async(cmd.new_password)
            )
            await self._user_repo.update(user)

            # Step 4: End every session
            await self._session_service.revoke_all(user)

            self._logger.info("password_reset_completed", user_id=str(user.id), flow="link")
            return Success(value=user.id)

        except Exception as e:
            self._logger.error("password_reset_confirm_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


def invalid_reset_token() -> ValidationError:
    """Single failure for unknown, expired and used reset tokens."""
    return ValidationError(
        code=ErrorCode.RESET_TOKEN_INVALID,
        message=PasswordResetTokenError.INVALID,
        field="token",
    )
