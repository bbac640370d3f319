"""OTP engine: issue and redeem one-time codes.

Issue:
1. Classify the contact (email -> EMAIL medium, phone -> SMS medium)
2. Count codes issued to (user, purpose) in the current rate-limit window
3. At the ceiling: burn every code of that window and refuse
4. Generate a code and deliver it
5. Persist the digest only after delivery succeeded (all-or-nothing)

Redeem:
1. Find the newest unused, unexpired record whose digest matches (and, for
   contact verification, whose contact digest matches the contact named)
2. Flip is_used with a conditional update; losing that race is a failure

Every redemption failure carries the same vague message so callers cannot
tell a wrong code from an expired or reused one.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from uuid_extensions import uuid7

from src.application.dtos import IssuedOtp
from src.application.services.message_templates import OutboundMessage
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities import OtpRecord, User
from src.domain.enums import ContactKind, OtpMedium, OtpPurpose
from src.domain.protocols import (
    ClockProtocol,
    EmailServiceProtocol,
    LoggerProtocol,
    OtpRepository,
    SmsServiceProtocol,
    TokenDigestProtocol,
)
from src.domain.validators import classify_contact, normalize_contact

if TYPE_CHECKING:
    from src.infrastructure.security.one_time_secret_generator import (
        OneTimeSecretGenerator,
    )

INVALID_CODE_MESSAGE = "Invalid or expired code"
INVALID_RESET_CODE_MESSAGE = "Invalid or expired password reset token"

MessageBuilder = Callable[[str, int], OutboundMessage]
"""Builds the outbound message from (code, valid_minutes)."""


@dataclass(frozen=True, slots=True, kw_only=True)
class OtpPolicy:
    """Ceiling and lifetime for one purpose."""

    max_per_window: int
    valid_minutes: int


class OtpService:
    """Issues and redeems one-time codes.

    Usage:
        result = await otp_service.issue(
            user,
            OtpPurpose.EMAIL_VERIFICATION,
            user.email,
            build_message=lambda code, minutes: verification_code_message(code, name, minutes),
        )
    """

    def __init__(
        self,
        *,
        otp_repo: OtpRepository,
        email_service: EmailServiceProtocol,
        sms_service: SmsServiceProtocol,
        token_digest: TokenDigestProtocol,
        secret_generator: "OneTimeSecretGenerator",  # Forward reference
        clock: ClockProtocol,
        logger: LoggerProtocol,
        default_policy: OtpPolicy = OtpPolicy(max_per_window=5, valid_minutes=10),
        forgot_password_policy: OtpPolicy = OtpPolicy(max_per_window=3, valid_minutes=30),
    ) -> None:
        self._otp_repo = otp_repo
        self._email_service = email_service
        self._sms_service = sms_service
        self._token_digest = token_digest
        self._secret_generator = secret_generator
        self._clock = clock
        self._logger = logger
        self._default_policy = default_policy
        self._forgot_password_policy = forgot_password_policy

    def policy_for(self, purpose: OtpPurpose) -> OtpPolicy:
        """Ceiling and lifetime applied to a purpose."""
        if purpose is OtpPurpose.FORGOT_PASSWORD:
            return self._forgot_password_policy
        return self._default_policy

    async def issue(
        self,
        user: User,
        purpose: OtpPurpose,
        contact: str,
        *,
        build_message: MessageBuilder,
    ) -> Result[IssuedOtp, DomainError]:
        """Rate-limit, generate, deliver, then persist a code.

        Returns:
            Success(IssuedOtp) on delivery.
            Failure(ValidationError) for an invalid contact, an exhausted
            window (OTP_RATE_LIMIT_EXCEEDED) or a failed delivery.
        """
        kind = classify_contact(contact)
        if kind is ContactKind.INVALID:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL_OR_PHONE,
                    message="Invalid email or phone format",
                    field="email_or_phone",
                )
            )
        contact = normalize_contact(contact)
        medium = OtpMedium.EMAIL if kind is ContactKind.EMAIL else OtpMedium.SMS
        policy = self.policy_for(purpose)

        window = self._clock.current_day()
        issued_count = await self._otp_repo.count_in_window(user.id, purpose, window)
        if issued_count >= policy.max_per_window:
            burned = await self._otp_repo.mark_used_in_window(user.id, purpose, window)
            self._logger.warning(
                "otp_rate_limit_exceeded",
                user_id=str(user.id),
                purpose=purpose.value,
                issued_count=issued_count,
                burned_count=burned,
            )
            return Failure(
                error=ValidationError(
                    code=ErrorCode.OTP_RATE_LIMIT_EXCEEDED,
                    message=_limit_message(purpose),
                )
            )

        code = self._secret_generator.generate_code()
        message = build_message(code, policy.valid_minutes)

        if medium is OtpMedium.EMAIL:
            delivery = await self._email_service.send_email(
                contact, message.subject, message.body
            )
        else:
            delivery = await self._sms_service.send_sms(contact, message.body)

        if isinstance(delivery, Failure):
            self._logger.warning(
                "otp_delivery_failed",
                user_id=str(user.id),
                purpose=purpose.value,
                medium=medium.value,
                error_code=delivery.error.code.value,
            )
            return Failure(
                error=ValidationError(
                    code=ErrorCode.OTP_DELIVERY_FAILED,
                    message="Failed to send code. Please try again",
                )
            )

        now = self._clock.now()
        record = OtpRecord(
            id=uuid7(),
            user_id=user.id,
            code_hash=self._token_digest.digest(code),
            purpose=purpose,
            medium=medium,
            expires_at=now + timedelta(minutes=policy.valid_minutes),
            message_id=delivery.value,
            contact_hash=self._token_digest.digest(contact),
            created_at=now,
        )
        await self._otp_repo.save(record)

        self._logger.info(
            "otp_issued",
            user_id=str(user.id),
            otp_id=str(record.id),
            purpose=purpose.value,
            medium=medium.value,
            message_id=delivery.value,
        )
        return Success(
            value=IssuedOtp(otp_id=record.id, medium=medium, expires_at=record.expires_at)
        )

    async def consume(
        self,
        code: str,
        purpose: OtpPurpose,
        user_id: UUID | None = None,
        contact: str | None = None,
    ) -> Result[OtpRecord, ValidationError]:
        """Redeem a code exactly once.

        Codes are generated as uppercase hex, so surrounding whitespace is
        trimmed and case is folded before the digest is compared. The match
        itself is exact.

        Args:
            code: Code as typed by the user.
            purpose: Flow the code must have been issued for.
            user_id: Restrict to the user's codes when the caller is known.
            contact: Restrict to codes delivered to this email or phone.
        """
        normalized = code.strip().upper()
        contact_hash = (
            self._token_digest.digest(normalize_contact(contact))
            if contact is not None
            else None
        )
        record = await self._otp_repo.find_redeemable(
            self._token_digest.digest(normalized),
            purpose,
            self._clock.now(),
            user_id,
            contact_hash,
        )
        if record is None:
            self._logger.info(
                "otp_rejected",
                purpose=purpose.value,
                user_id=str(user_id) if user_id else None,
            )
            return Failure(error=_invalid_code(purpose))

        if not await self._otp_repo.mark_used(record.id):
            self._logger.info("otp_redeem_race_lost", otp_id=str(record.id))
            return Failure(error=_invalid_code(purpose))

        record.is_used = True
        self._logger.info(
            "otp_redeemed",
            otp_id=str(record.id),
            user_id=str(record.user_id),
            purpose=purpose.value,
        )
        return Success(value=record)

    async def revoke(self, user_id: UUID, purpose: OtpPurpose) -> int:
        """Burn every outstanding code of the user for a purpose.

        Used when the contact a code was sent to stops belonging to the user.
        """
        burned = await self._otp_repo.mark_used_for_user(user_id, purpose)
        if burned:
            self._logger.info(
                "otp_revoked",
                user_id=str(user_id),
                purpose=purpose.value,
                burned_count=burned,
            )
        return burned


def _limit_message(purpose: OtpPurpose) -> str:
    if purpose is OtpPurpose.FORGOT_PASSWORD:
        return "Daily password reset limit exceeded. Please try again tomorrow."
    return "Daily verification code limit exceeded. Please try again tomorrow."


def _invalid_code(purpose: OtpPurpose) -> ValidationError:
    return ValidationError(
        code=ErrorCode.OTP_INVALID,
        message=(
            INVALID_RESET_CODE_MESSAGE
            if purpose is OtpPurpose.FORGOT_PASSWORD
            else INVALID_CODE_MESSAGE
        ),
        field="code",
    )
