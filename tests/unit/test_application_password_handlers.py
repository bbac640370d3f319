"""Unit tests for the password lifecycle handlers.

Tests cover:
- Forgot password: reset link in the code message, unknown contacts
- Reset with a forgot-password code: single use, all sessions ended
- Reset link tokens: request, validate, confirm, expiry and reuse
- Unknown, expired and used reset tokens fail identically
- Change password and first-password generation
"""

import pytest

from src.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
    GeneratePasswordHandler,
)
from src.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
    ResetForgotPasswordHandler,
)
from src.application.commands.handlers.password_reset_token_handler import (
    ConfirmPasswordResetTokenHandler,
    PasswordResetTokenError,
    RequestPasswordResetTokenHandler,
    ValidatePasswordResetTokenHandler,
)
from src.application.commands.password_commands import (
    ChangePassword,
    ConfirmPasswordResetToken,
    ForgotPassword,
    GeneratePassword,
    RequestPasswordResetToken,
    ResetForgotPassword,
    ValidatePasswordResetToken,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from src.core.result import Failure, Success
from src.domain.enums import LoginType
from tests.utils.factories import (
    make_otp_service,
    make_session_service,
    make_token_digest,
    make_user,
)
from tests.utils.fakes import (
    FailingTransport,
    FixedClock,
    InMemoryOtpRepository,
    InMemoryPasswordResetTokenRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
    PlainPasswordService,
    RecordingLogger,
    RecordingTransport,
    SequenceSecretGenerator,
)

FE_BASE_URL = "https://app.example.com"


@pytest.fixture
def user():
    return make_user(phone="+14155550100")


@pytest.fixture
def user_repo(user):
    return InMemoryUserRepository([user])


@pytest.fixture
def session_repo():
    return InMemorySessionRepository()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def session_service(session_repo, user_repo, clock, logger):
    return make_session_service(
        session_repo=session_repo, user_repo=user_repo, clock=clock, logger=logger
    )


@pytest.fixture
def otp_service(clock, transport, logger):
    return make_otp_service(
        otp_repo=InMemoryOtpRepository(),
        email_service=transport,
        sms_service=transport,
        clock=clock,
        logger=logger,
    )


# =============================================================================
# Forgot password (one-time code)
# =============================================================================


@pytest.mark.unit
class TestForgotPasswordHandler:
    async def test_email_contact_gets_reset_link(self, user_repo, otp_service, logger, transport):
        # Arrange
        handler = ForgotPasswordHandler(user_repo, otp_service, logger, FE_BASE_URL + "/")

        # Act
        result = await handler.handle(ForgotPassword(email_or_phone="jane@example.com"))

        # Assert
        assert isinstance(result, Success)
        to, subject, body = transport.sent[0]
        assert to == "jane@example.com"
        assert subject == "Forgot Password"
        assert "https://app.example.com/reset-password?token=A1B2C3" in body
        assert "30 minute(s)" in body

    async def test_phone_contact_gets_sms(self, user_repo, otp_service, logger, transport):
        handler = ForgotPasswordHandler(user_repo, otp_service, logger, FE_BASE_URL)

        result = await handler.handle(ForgotPassword(email_or_phone="+14155550100"))

        assert result.value.medium.value == "sms"
        assert transport.sent[0][0] == "+14155550100"

    async def test_unknown_contact_is_not_found(self, otp_service, logger):
        handler = ForgotPasswordHandler(InMemoryUserRepository(), otp_service, logger, FE_BASE_URL)

        result = await handler.handle(ForgotPassword(email_or_phone="ghost@example.com"))

        assert isinstance(result.error, NotFoundError)
        assert result.error.code is ErrorCode.USER_NOT_FOUND

    async def test_fourth_request_of_the_day_is_refused(self, user_repo, otp_service, logger):
        handler = ForgotPasswordHandler(user_repo, otp_service, logger, FE_BASE_URL)
        for _ in range(3):
            await handler.handle(ForgotPassword(email_or_phone="jane@example.com"))

        result = await handler.handle(ForgotPassword(email_or_phone="jane@example.com"))

        assert result.error.code is ErrorCode.OTP_RATE_LIMIT_EXCEEDED


@pytest.mark.unit
class TestResetForgotPasswordHandler:
    async def test_code_resets_password_and_ends_sessions(
        self, user, user_repo, otp_service, session_service, session_repo, logger
    ):
        # Arrange: two live sessions and a delivered code
        await session_service.create(user, login_type=LoginType.CREDENTIALS)
        await session_service.create(user, login_type=LoginType.CREDENTIALS)
        await ForgotPasswordHandler(user_repo, otp_service, logger, FE_BASE_URL).handle(
            ForgotPassword(email_or_phone="jane@example.com")
        )
        handler = ResetForgotPasswordHandler(
            user_repo, otp_service, PlainPasswordService(), session_service, logger
        )

        # Act
        result = await handler.handle(ResetForgotPassword(code="a1b2c3", new_password="New@12345"))

        # Assert
        assert result == Success(value=user.id)
        assert user_repo.rows[user.id].password_hash == "hashed:New@12345"
        assert session_repo.rows == {}

    async def test_code_is_single_use(self, user_repo, otp_service, session_service, logger):
        await ForgotPasswordHandler(user_repo, otp_service, logger, FE_BASE_URL).handle(
            ForgotPassword(email_or_phone="jane@example.com")
        )
        handler = ResetForgotPasswordHandler(
            user_repo, otp_service, PlainPasswordService(), session_service, logger
        )
        await handler.handle(ResetForgotPassword(code="A1B2C3", new_password="New@12345"))

        result = await handler.handle(ResetForgotPassword(code="A1B2C3", new_password="Other@123"))

        assert result.error.code is ErrorCode.OTP_INVALID
        assert result.error.message == "Invalid or expired password reset token"

    async def test_wrong_code(self, user_repo, otp_service, session_service, logger):
        handler = ResetForgotPasswordHandler(
            user_repo, otp_service, PlainPasswordService(), session_service, logger
        )

        result = await handler.handle(ResetForgotPassword(code="FFFFFF", new_password="New@12345"))

        assert isinstance(result, Failure)


# =============================================================================
# Reset link tokens
# =============================================================================


@pytest.fixture
def token_repo():
    return InMemoryPasswordResetTokenRepository()


@pytest.fixture
def request_handler(user_repo, token_repo, transport, clock, logger):
    return RequestPasswordResetTokenHandler(
        user_repo,
        token_repo,
        transport,
        SequenceSecretGenerator(),
        make_token_digest(),
        clock,
        logger,
        FE_BASE_URL,
    )


@pytest.mark.unit
class TestRequestPasswordResetTokenHandler:
    async def test_mails_link_then_stores_digest(
        self, request_handler, token_repo, transport, clock
    ):
        result = await request_handler.handle(RequestPasswordResetToken(email="jane@example.com"))

        assert isinstance(result, Success)
        stored = token_repo.rows[result.value]
        assert stored.token_hash == make_token_digest().digest("9B3E01D7")
        assert (stored.expires_at - clock.now()).total_seconds() == 30 * 60
        assert "https://app.example.com/reset-password?token=9B3E01D7" in transport.sent[0][2]

    async def test_unknown_email(self, request_handler):
        result = await request_handler.handle(RequestPasswordResetToken(email="ghost@example.com"))

        assert result.error.code is ErrorCode.USER_NOT_FOUND

    async def test_failed_mail_stores_nothing(self, user_repo, token_repo, clock, logger):
        handler = RequestPasswordResetTokenHandler(
            user_repo,
            token_repo,
            FailingTransport(InternalError(code=ErrorCode.INTERNAL_ERROR, message="down")),
            SequenceSecretGenerator(),
            make_token_digest(),
            clock,
            logger,
            FE_BASE_URL,
        )

        result = await handler.handle(RequestPasswordResetToken(email="jane@example.com"))

        assert result.error.code is ErrorCode.OTP_DELIVERY_FAILED
        assert token_repo.rows == {}


@pytest.mark.unit
class TestValidateAndConfirmPasswordResetToken:
    async def _issue(self, request_handler):
        await request_handler.handle(RequestPasswordResetToken(email="jane@example.com"))
        return "9B3E01D7"

    def _confirm_handler(self, user_repo, token_repo, session_service, clock, logger):
        return ConfirmPasswordResetTokenHandler(
            user_repo,
            token_repo,
            PlainPasswordService(),
            session_service,
            make_token_digest(),
            clock,
            logger,
        )

    async def test_fresh_token_validates(self, request_handler, token_repo, clock, logger):
        token = await self._issue(request_handler)
        handler = ValidatePasswordResetTokenHandler(token_repo, make_token_digest(), clock, logger)

        result = await handler.handle(ValidatePasswordResetToken(token=token.lower()))

        assert result == Success(value=True)

    async def test_unknown_token_is_invalid(self, token_repo, clock, logger):
        handler = ValidatePasswordResetTokenHandler(token_repo, make_token_digest(), clock, logger)

        result = await handler.handle(ValidatePasswordResetToken(token="DEADBEEF"))

        assert isinstance(result.error, ValidationError)
        assert result.error.code is ErrorCode.RESET_TOKEN_INVALID
        assert result.error.message == "Invalid or expired password reset token"
        assert result.error.field == "token"

    async def test_expired_token(self, request_handler, token_repo, clock, logger):
        token = await self._issue(request_handler)
        clock.advance(minutes=30)
        handler = ValidatePasswordResetTokenHandler(token_repo, make_token_digest(), clock, logger)

        result = await handler.handle(ValidatePasswordResetToken(token=token))

        assert result.error.code is ErrorCode.RESET_TOKEN_INVALID
        assert result.error.message == PasswordResetTokenError.INVALID
        assert logger.events[-1].context["reason"] == "expired"

    async def test_confirm_sets_password_and_ends_sessions(
        self,
        request_handler,
        user,
        user_repo,
        token_repo,
        session_service,
        session_repo,
        clock,
        logger,
    ):
        # Arrange
        await session_service.create(user, login_type=LoginType.CREDENTIALS)
        token = await self._issue(request_handler)
        handler = self._confirm_handler(user_repo, token_repo, session_service, clock, logger)

        # Act
        result = await handler.handle(
            ConfirmPasswordResetToken(token=token, new_password="New@12345")
        )

        # Assert
        assert result == Success(value=user.id)
        assert user_repo.rows[user.id].password_hash == "hashed:New@12345"
        assert session_repo.rows == {}
        assert all(row.is_used for row in token_repo.rows.values())

    async def test_used_token_cannot_confirm_or_validate(
        self, request_handler, user_repo, token_repo, session_service, clock, logger
    ):
        token = await self._issue(request_handler)
        confirm = self._confirm_handler(user_repo, token_repo, session_service, clock, logger)
        await confirm.handle(ConfirmPasswordResetToken(token=token, new_password="New@12345"))

        again = await confirm.handle(
            ConfirmPasswordResetToken(token=token, new_password="Other@123")
        )
        validated = await ValidatePasswordResetTokenHandler(
            token_repo, make_token_digest(), clock, logger
        ).handle(ValidatePasswordResetToken(token=token))

        assert again.error.code is ErrorCode.RESET_TOKEN_INVALID
        assert validated.error.message == PasswordResetTokenError.INVALID

    async def test_lost_confirm_race_is_reported_as_invalid(
        self, request_handler, user_repo, token_repo, session_service, clock, logger
    ):
        token = await self._issue(request_handler)

        async def already_used(token_id):
            return False

        token_repo.mark_used = already_used
        confirm = self._confirm_handler(user_repo, token_repo, session_service, clock, logger)

        result = await confirm.handle(
            ConfirmPasswordResetToken(token=token, new_password="New@12345")
        )

        assert result.error.code is ErrorCode.RESET_TOKEN_INVALID
        assert user_repo.rows[next(iter(user_repo.rows))].password_hash == "hashed:Secret@123"

    async def test_unknown_expired_and_used_tokens_are_indistinguishable(
        self, request_handler, user_repo, token_repo, session_service, clock, logger
    ):
        expired = await self._issue(request_handler)
        clock.advance(minutes=31)
        await request_handler.handle(RequestPasswordResetToken(email="jane@example.com"))
        used = "1234ABCD"
        confirm = self._confirm_handler(user_repo, token_repo, session_service, clock, logger)
        await confirm.handle(ConfirmPasswordResetToken(token=used, new_password="New@12345"))
        validate = ValidatePasswordResetTokenHandler(
            token_repo, make_token_digest(), clock, logger
        )

        failures = [
            (await validate.handle(ValidatePasswordResetToken(token=token))).error
            for token in ("DEADBEEF", expired, used)
        ]

        assert failures[0] == failures[1] == failures[2]
        assert [
            event.context["reason"]
            for event in logger.events
            if event.message == "password_reset_token_rejected"
        ] == ["unknown", "expired", "used"]


# =============================================================================
# Authenticated password changes
# =============================================================================


@pytest.mark.unit
class TestChangePasswordHandler:
    async def test_change_with_correct_old_password(self, user, user_repo, logger):
        handler = ChangePasswordHandler(user_repo, PlainPasswordService(), logger)

        result = await handler.handle(
            ChangePassword(user_id=user.id, old_password="Secret@123", new_password="New@12345")
        )

        assert result == Success(value=None)
        assert user_repo.rows[user.id].password_hash == "hashed:New@12345"

    async def test_wrong_old_password(self, user, user_repo, logger):
        handler = ChangePasswordHandler(user_repo, PlainPasswordService(), logger)

        result = await handler.handle(
            ChangePassword(user_id=user.id, old_password="Wrong@123", new_password="New@12345")
        )

        assert result.error.code is ErrorCode.OLD_PASSWORD_MISMATCH
        assert result.error.field == "old_password"
        assert user_repo.rows[user.id].password_hash == "hashed:Secret@123"

    async def test_change_keeps_sessions(
        self, user, user_repo, session_service, session_repo, logger
    ):
        await session_service.create(user, login_type=LoginType.CREDENTIALS)
        handler = ChangePasswordHandler(user_repo, PlainPasswordService(), logger)

        await handler.handle(
            ChangePassword(user_id=user.id, old_password="Secret@123", new_password="New@12345")
        )

        assert len(session_repo.rows) == 1


@pytest.mark.unit
class TestGeneratePasswordHandler:
    async def test_social_account_sets_first_password(self, logger):
        social = make_user(password_hash=None, social_ids={"google": "sub"})
        user_repo = InMemoryUserRepository([social])
        handler = GeneratePasswordHandler(user_repo, PlainPasswordService(), logger)

        result = await handler.handle(GeneratePassword(user_id=social.id, new_password="New@12345"))

        assert isinstance(result, Success)
        assert user_repo.rows[social.id].has_password()

    async def test_existing_password_is_conflict(self, user, user_repo, logger):
        handler = GeneratePasswordHandler(user_repo, PlainPasswordService(), logger)

        result = await handler.handle(GeneratePassword(user_id=user.id, new_password="New@12345"))

        assert isinstance(result.error, ConflictError)
        assert result.error.code is ErrorCode.PASSWORD_ALREADY_SET
