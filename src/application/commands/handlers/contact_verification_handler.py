"""Contact verification with one-time codes.

GenerateOtpHandler sends a code to one of the authenticated user's own
contacts; VerifyOtpHandler redeems it and sets email_verified or
phone_verified. The code purpose follows the contact kind.
"""

from src.application.commands.otp_commands import GenerateOtp, VerifyOtp
from src.application.dtos import IssuedOtp, UserProfile, to_user_profile
from src.application.services import OtpService
from src.application.services.message_templates import (
    OutboundMessage,
    verification_code_message,
)
from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    ValidationError,
    unexpected_error,
    user_not_found,
)
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import ContactKind, OtpPurpose
from src.domain.protocols import LoggerProtocol, UserRepository
from src.domain.validators import classify_contact, normalize_contact


def purpose_for(kind: ContactKind) -> OtpPurpose:
    """Verification purpose matching a contact kind."""
    if kind is ContactKind.PHONE:
        return OtpPurpose.PHONE_VERIFICATION
    return OtpPurpose.EMAIL_VERIFICATION


def _resolve_own_contact(
    user: User, email_or_phone: str
) -> Result[ContactKind, ValidationError]:
    """The contact must classify and must be the user's own."""
    kind = classify_contact(email_or_phone)
    if kind is ContactKind.INVALID or user.contact_for(kind) != normalize_contact(
        email_or_phone
    ):
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_EMAIL_OR_PHONE,
                message="Email or phone does not belong to this account",
                field="email_or_phone",
            )
        )
    return Success(value=kind)


def _already_verified(kind: ContactKind) -> ConflictError:
    return ConflictError(
        code=ErrorCode.ALREADY_VERIFIED,
        message=f"{kind.value.capitalize()} already verified",
        resource_type="User",
        conflicting_field=kind.value,
    )


class GenerateOtpHandler:
    """Handler for GenerateOtp command."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._otp_service = otp_service
        self._logger = logger

    async def handle(self, cmd: GenerateOtp) -> Result[IssuedOtp, DomainError]:
        """Send a verification code.

        Returns:
            Success(IssuedOtp) once delivered.
            Failure(ConflictError ALREADY_VERIFIED) if nothing is left to verify.
            Failure(ValidationError) for a foreign contact, rate limit or delivery failure.
        """
        try:
            user = await self._user_repo.find_by_id(cmd.user_id)
            if user is None:
                return Failure(error=user_not_found())

            kind_result = _resolve_own_contact(user, cmd.email_or_phone)
            if isinstance(kind_result, Failure):
                return kind_result
            kind = kind_result.value

            if user.is_verified(kind):
                return Failure(error=_already_verified(kind))

            def build_message(code: str, valid_minutes: int) -> OutboundMessage:
                return verification_code_message(code, user.first_name, valid_minutes)

            return await self._otp_service.issue(
                user,
                purpose_for(kind),
                cmd.email_or_phone,
                build_message=build_message,
            )

        except Exception as e:
            self._logger.error("otp_generate_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())


class VerifyOtpHandler:
    """Handler for VerifyOtp command."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_service: OtpService,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._otp_service = otp_service
        self._logger = logger

    async def handle(self, cmd: VerifyOtp) -> Result[UserProfile, DomainError]:
        """Redeem a verification code and flag the contact verified.

        Returns:
            Success(UserProfile) with the new verification state.
            Failure(ValidationError OTP_INVALID) "Invalid or expired code".
        """
        try:
            user = await self._user_repo.find_by_id(cmd.user_id)
            if user is None:
                return Failure(error=user_not_found())

            kind_result = _resolve_own_contact(user, cmd.email_or_phone)
            if isinstance(kind_result, Failure):
                return kind_result
            kind = kind_result.value

            if user.is_verified(kind):
                return Failure(error=_already_verified(kind))

            otp_result = await self._otp_service.consume(
                cmd.code, purpose_for(kind), user_id=user.id, contact=cmd.email_or_phone
            )
            if isinstance(otp_result, Failure):
                return otp_result

            user.mark_verified(kind)
            await self._user_repo.update(user)

            self._logger.info("contact_verified", user_id=str(user.id), kind=kind.value)
            return Success(value=to_user_profile(user))

        except Exception as e:
            self._logger.error("otp_verify_failed_unexpectedly", error=e)
            return Failure(error=unexpected_error())
