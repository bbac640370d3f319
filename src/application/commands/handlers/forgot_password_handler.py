"""Forgot-password flow over the OTP engine.

Request (ForgotPasswordHandler):
1. Classify email_or_phone and find the user (NotFound otherwise)
2. Issue a FORGOT_PASSWORD code; the message carries
   ``{FE_BASE_URL}/reset-password?token=<code>``
3. Rate limit: 3 codes per day, exceeding it burns the day's codes

Reset (ResetForgotPasswordHandler):
1. Redeem the code (single use, vague failure message)
2. Hash and store the new password
3. End every session of the user
"""

from uuid import UUID

from src.application.commands.password_commands import ForgotPassword, ResetForgotPassword
from src.application.dtos import IssuedOtp
from src.application.services import OtpService, SessionService
from src.application.services.message_templates import (
    OutboundMessage,
    forgot_password_message,
)
from src.core.enums import ErrorCode
from src.core.errors import (
    DomainError,
    ValidationError,
    unexpected_error,
    user_not_found,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import ContactKind, OtpPurpose
from src.domain.protocols import LoggerProtocol, PasswordHashingProtocol, UserRepository
from src.domain.validators import classify_contact, normalize_contact


class ForgotPasswordHandler:
    """Send a forgot-password code to the user's email or phone."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        logger: LoggerProtocol,
        fe_base_url: str,
    ) -> None:
        """Initialize handler.

        Args:
            user_repo: User lookups.
            otp_service: Issues the code.
            logger: Structured logger.
            fe_base_url: Front-end origin used to build the reset link.
        """
        self._user_repo = user_repo
        self._otp_service = otp_service
        self._logger = logger
        self._fe_base_url = fe_base_url.rstrip("/")

    async def handle(self, cmd: ForgotPassword) -> Result[IssuedOtp, DomainError]:
        """Handle forgot-password request.

        Returns:
            Success(IssuedOtp) once the code is delivered.
            Failure(ValidationError) for a bad contact, rate limit or delivery failure.
            Failure(NotFoundError) if no user owns the contact.
        """
        try:
            kind = classify_contact(cmd.email_or_phone)
            if kind is ContactKind.INVALID:
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.INVALID_EMAIL_OR_PHONE,
                        message="Invalid email or phone format",
                        field="email_or_phone",
                    )
                )
            contact = normalize_contact(cmd.email_or_phone)

            user: User | None
            if kind is ContactKind.EMAIL:
                user = await self._user_repo.find_by_email(contact)
            else:
                user = await self._user_repo.find_by_phone(contact)
            if user is None:
                return Failure(error=user_not_found())

            def build_message(code: str, valid_minutes: int) -> OutboundMessage:
                reset_url = f"{self._fe_base_url}/reset-password?token={code}"
                return forgot_password_message(reset_url, user.first_name, valid_minutes)

            return await self._otp_service.issue(
                user, OtpPurpose.FORGOT_PASSWORD, contact, build_message=build_message
            )

        except Exception as e:
            self._logger.error("forgot_password_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


class ResetForgotPasswordHandler:
    """Set a new password with a forgot-password code."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        password_service: PasswordHashingProtocol,
        session_service: SessionService,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._otp_service = otp_service
        self._password_service = password_service
        self._session_service = session_service
        self._logger = logger

    async def handle(self, cmd: ResetForgotPassword) -> Result[UUID, DomainError]:
        """Redeem the code and replace the password.

        Returns:
            Success(user_id) after the password changed and sessions ended.
            Failure(ValidationError OTP_INVALID) "Invalid or expired password reset token".
        """
        try:
            # Step 1: Redeem code (marks it used)
            otp_result = await self._otp_service.consume(cmd.code, OtpPurpose.FORGOT_PASSWORD)
            if isinstance(otp_result, Failure):
                return otp_result
            record = otp_result.value

            # Step 2: Load the owner
            user = await self._user_repo.find_by_id(record.user_id)
            if user is None:
                return Failure(error=user_not_found())

            # Step 3: Store new password
            user.set_password_hash(
                await self._password_service.hash_password_async(cmd.new_password)
            )
            await self._user_repo.update(user)

            # Step 4: Sessions opened with the old password end here
            await self._session_service.revoke_all(user)

            self._logger.info("password_reset_completed", user_id=str(user.id), flow="otp")
            return Success(value=user.id)

        except Exception as e:
            self._logger.error("password_reset_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
