"""Authentication handler dependency factories.

Request-scoped handler instances for authentication operations:
- Login (credentials, social), registration, register-after-social
- Token refresh, logout, current user
- Forgot password (code) and reset link flows
- Change / generate password
- Contact verification codes

Repositories share one database session per request (FastAPI caches
``get_db_session`` within a request).
"""

from typing import TYPE_CHECKING

from fastapi import Depends

from src.core.config import get_settings
from src.core.container.infrastructure import (
    get_clock,
    get_email_service,
    get_logger,
    get_password_service,
    get_secret_generator,
    get_sms_service,
    get_social_registry,
    get_token_digest,
    get_token_service,
)
from src.core.container.repositories import (
    get_otp_repository,
    get_password_reset_token_repository,
    get_session_repository,
    get_user_repository,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
        GeneratePasswordHandler,
    )
    from src.application.commands.handlers.complete_social_registration_handler import (
        CompleteSocialRegistrationHandler,
    )
    from src.application.commands.handlers.contact_verification_handler import (
        GenerateOtpHandler,
        VerifyOtpHandler,
    )
    from src.application.commands.handlers.forgot_password_handler import (
        ForgotPasswordHandler,
        ResetForgotPasswordHandler,
    )
    from src.application.commands.handlers.login_user_handler import LoginUserHandler
    from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
    from src.application.commands.handlers.password_reset_token_handler import (
        ConfirmPasswordResetTokenHandler,
        RequestPasswordResetTokenHandler,
        ValidatePasswordResetTokenHandler,
    )
    from src.application.commands.handlers.refresh_token_handler import (
        RefreshTokenHandler,
    )
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )
    from src.application.commands.handlers.social_login_handler import (
        SocialLoginHandler,
    )
    from src.application.queries.handlers.get_current_user_handler import (
        GetCurrentUserHandler,
    )
    from src.application.services import OtpService, SessionService
    from src.infrastructure.persistence.repositories import (
        OtpRepository,
        PasswordResetTokenRepository,
        SessionRepository,
        UserRepository,
    )


# ============================================================================
# Application Services (Request-Scoped)
# ============================================================================


async def get_session_service(
    session_repo: "SessionRepository" = Depends(get_session_repository),
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "SessionService":
    """Get session store service (request-scoped)."""
    from src.application.services import SessionService

    return SessionService(
        session_repo=session_repo,
        user_repo=user_repo,
        token_service=get_token_service(),
        token_digest=get_token_digest(),
        clock=get_clock(),
        logger=get_logger(),
        enforce_device_binding=get_settings().enforce_device_binding,
    )


async def get_otp_service(
    otp_repo: "OtpRepository" = Depends(get_otp_repository),
) -> "OtpService":
    """Get OTP engine (request-scoped) with policies from settings."""
    from src.application.services import OtpPolicy, OtpService

    settings = get_settings()
    return OtpService(
        otp_repo=otp_repo,
        email_service=get_email_service(),
        sms_service=get_sms_service(),
        token_digest=get_token_digest(),
        secret_generator=get_secret_generator(),
        clock=get_clock(),
        logger=get_logger(),
        default_policy=OtpPolicy(
            max_per_window=settings.otp_max_per_window,
            valid_minutes=settings.otp_valid_minutes,
        ),
        forgot_password_policy=OtpPolicy(
            max_per_window=settings.forgot_password_max_per_window,
            valid_minutes=settings.forgot_password_valid_minutes,
        ),
    )


# ============================================================================
# Authentication Handler Factories
# ============================================================================


async def get_login_user_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_service: "SessionService" = Depends(get_session_service),
) -> "LoginUserHandler":
    """Get LoginUser command handler (request-scoped).

    Usage:
        @router.post("/login")
        async def login(handler: LoginUserHandler = Depends(get_login_user_handler)):
            result = await handler.handle(command)
    """
    from src.application.commands.handlers.login_user_handler import LoginUserHandler

    return LoginUserHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        session_service=session_service,
        logger=get_logger(),
    )


async def get_social_login_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    session_service: "SessionService" = Depends(get_session_service),
) -> "SocialLoginHandler":
    """Get SocialLogin command handler (request-scoped)."""
    from src.application.commands.handlers.social_login_handler import (
        SocialLoginHandler,
    )

    return SocialLoginHandler(
        registry=get_social_registry(),
        user_repo=user_repo,
        session_service=session_service,
        logger=get_logger(),
    )


async def get_register_user_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "RegisterUserHandler":
    """Get RegisterUser command handler (request-scoped)."""
    from src.application.commands.handlers.register_user_handler import (
        RegisterUserHandler,
    )

    return RegisterUserHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        logger=get_logger(),
    )


async def get_complete_social_registration_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    otp_service: "OtpService" = Depends(get_otp_service),
) -> "CompleteSocialRegistrationHandler":
    """Get CompleteSocialRegistration command handler (request-scoped)."""
    from src.application.commands.handlers.complete_social_registration_handler import (
        CompleteSocialRegistrationHandler,
    )

    return CompleteSocialRegistrationHandler(
        user_repo=user_repo, otp_service=otp_service, logger=get_logger()
    )


async def get_refresh_token_handler(
    session_service: "SessionService" = Depends(get_session_service),
) -> "RefreshTokenHandler":
    """Get RefreshTokens command handler (request-scoped)."""
    from src.application.commands.handlers.refresh_token_handler import (
        RefreshTokenHandler,
    )

    return RefreshTokenHandler(session_service=session_service, logger=get_logger())


async def get_logout_user_handler(
    session_service: "SessionService" = Depends(get_session_service),
) -> "LogoutUserHandler":
    """Get LogoutUser command handler (request-scoped)."""
    from src.application.commands.handlers.logout_user_handler import LogoutUserHandler

    return LogoutUserHandler(session_service=session_service, logger=get_logger())


async def get_current_user_handler(
    session_service: "SessionService" = Depends(get_session_service),
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "GetCurrentUserHandler":
    """Get GetCurrentUser query handler (request-scoped)."""
    from src.application.queries.handlers.get_current_user_handler import (
        GetCurrentUserHandler,
    )

    return GetCurrentUserHandler(
        session_service=session_service, user_repo=user_repo, logger=get_logger()
    )


# ============================================================================
# Password Handler Factories
# ============================================================================


async def get_forgot_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    otp_service: "OtpService" = Depends(get_otp_service),
) -> "ForgotPasswordHandler":
    """Get ForgotPassword command handler (request-scoped)."""
    from src.application.commands.handlers.forgot_password_handler import (
        ForgotPasswordHandler,
    )

    return ForgotPasswordHandler(
        user_repo=user_repo,
        otp_service=otp_service,
        logger=get_logger(),
        fe_base_url=get_settings().fe_base_url,
    )


async def get_reset_forgot_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    otp_service: "OtpService" = Depends(get_otp_service),
    session_service: "SessionService" = Depends(get_session_service),
) -> "ResetForgotPasswordHandler":
    """Get ResetForgotPassword command handler (request-scoped)."""
    from src.application.commands.handlers.forgot_password_handler import (
        ResetForgotPasswordHandler,
    )

    return ResetForgotPasswordHandler(
        user_repo=user_repo,
        otp_service=otp_service,
        password_service=get_password_service(),
        session_service=session_service,
        logger=get_logger(),
    )


async def get_request_password_reset_token_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    token_repo: "PasswordResetTokenRepository" = Depends(
        get_password_reset_token_repository
    ),
) -> "RequestPasswordResetTokenHandler":
    """Get RequestPasswordResetToken command handler (request-scoped)."""
    from src.application.commands.handlers.password_reset_token_handler import (
        RequestPasswordResetTokenHandler,
    )

    settings = get_settings()
    return RequestPasswordResetTokenHandler(
        user_repo=user_repo,
        token_repo=token_repo,
        email_service=get_email_service(),
        secret_generator=get_secret_generator(),
        token_digest=get_token_digest(),
        clock=get_clock(),
        logger=get_logger(),
        fe_base_url=settings.fe_base_url,
        valid_minutes=settings.password_reset_token_valid_minutes,
    )


async def get_validate_password_reset_token_handler(
    token_repo: "PasswordResetTokenRepository" = Depends(
        get_password_reset_token_repository
    ),
) -> "ValidatePasswordResetTokenHandler":
    """Get ValidatePasswordResetToken command handler (request-scoped)."""
    from src.application.commands.handlers.password_reset_token_handler import (
        ValidatePasswordResetTokenHandler,
    )

    return ValidatePasswordResetTokenHandler(
        token_repo=token_repo,
        token_digest=get_token_digest(),
        clock=get_clock(),
        logger=get_logger(),
    )


async def get_confirm_password_reset_token_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    token_repo: "PasswordResetTokenRepository" = Depends(
        get_password_reset_token_repository
    ),
    session_service: "SessionService" = Depends(get_session_service),
) -> "ConfirmPasswordResetTokenHandler":
    """Get ConfirmPasswordResetToken command handler (request-scoped)."""
    from src.application.commands.handlers.password_reset_token_handler import (
        ConfirmPasswordResetTokenHandler,
    )

    return ConfirmPasswordResetTokenHandler(
        user_repo=user_repo,
        token_repo=token_repo,
        password_service=get_password_service(),
        session_service=session_service,
        token_digest=get_token_digest(),
        clock=get_clock(),
        logger=get_logger(),
    )


async def get_change_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "ChangePasswordHandler":
    """Get ChangePassword command handler (request-scoped)."""
    from src.application.commands.handlers.change_password_handler import (
        ChangePasswordHandler,
    )

    return ChangePasswordHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        logger=get_logger(),
    )


async def get_generate_password_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
) -> "GeneratePasswordHandler":
    """Get GeneratePassword command handler (request-scoped)."""
    from src.application.commands.handlers.change_password_handler import (
        GeneratePasswordHandler,
    )

    return GeneratePasswordHandler(
        user_repo=user_repo,
        password_service=get_password_service(),
        logger=get_logger(),
    )


# ============================================================================
# Contact Verification Handler Factories
# ============================================================================


async def get_generate_otp_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    otp_service: "OtpService" = Depends(get_otp_service),
) -> "GenerateOtpHandler":
    """Get GenerateOtp command handler (request-scoped)."""
    from src.application.commands.handlers.contact_verification_handler import (
        GenerateOtpHandler,
    )

    return GenerateOtpHandler(user_repo=user_repo, otp_service=otp_service, logger=get_logger())


async def get_verify_otp_handler(
    user_repo: "UserRepository" = Depends(get_user_repository),
    otp_service: "OtpService" = Depends(get_otp_service),
) -> "VerifyOtpHandler":
    """Get VerifyOtp command handler (request-scoped)."""
    from src.application.commands.handlers.contact_verification_handler import (
        VerifyOtpHandler,
    )

    return VerifyOtpHandler(user_repo=user_repo, otp_service=otp_service, logger=get_logger())
