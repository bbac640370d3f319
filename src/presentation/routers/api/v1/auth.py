"""Auth resource router.

Endpoints (prefix /api/v1/auth):
    POST /login                        - Credentials login
    POST /social-login                 - Google / Apple / Facebook login
    POST /register                     - Create user (201)
    POST /register/social              - Complete profile after social login (bearer)
    POST /token/refresh                - Rotate tokens (bearer: expired access token)
    POST /logout                       - End current session (bearer)
    POST /password/forgot              - Send forgot-password code
    POST /password/forgot/reset        - Reset password with that code
    POST /password/reset-token         - Email a reset link
    GET  /password/reset-token/{token} - Check a reset link
    POST /password/reset-token/confirm - Reset password with a link token
    POST /password/change              - Change password (bearer)
    POST /password/generate            - First password for social accounts (bearer)
    POST /otp                          - Send contact verification code (bearer)
    POST /otp/verify                   - Verify contact (bearer)
    GET  /me                           - Current user (bearer)

Routes are thin: build the command, dispatch to the handler, map the
Result. Failures go through ErrorResponseBuilder.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse

from src.application.commands import (
    ChangePassword,
    CompleteSocialRegistration,
    ConfirmPasswordResetToken,
    DeviceContext,
    ForgotPassword,
    GenerateOtp,
    GeneratePassword,
    LoginUser,
    LogoutUser,
    RefreshTokens,
    RegisterUser,
    RequestPasswordResetToken,
    ResetForgotPassword,
    SocialLogin,
    ValidatePasswordResetToken,
    VerifyOtp,
)
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
from src.application.commands.handlers.social_login_handler import SocialLoginHandler
from src.application.dtos import to_user_profile
from src.core.container import (
    get_change_password_handler,
    get_complete_social_registration_handler,
    get_confirm_password_reset_token_handler,
    get_forgot_password_handler,
    get_generate_otp_handler,
    get_generate_password_handler,
    get_login_user_handler,
    get_logout_user_handler,
    get_refresh_token_handler,
    get_register_user_handler,
    get_request_password_reset_token_handler,
    get_reset_forgot_password_handler,
    get_social_login_handler,
    get_validate_password_reset_token_handler,
    get_verify_otp_handler,
)
from src.core.errors import DomainError
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import (
    AccessToken,
    CurrentUserDep,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.auth_schemas import (
    AuthTokensResponse,
    ChangePasswordRequest,
    CompleteSocialRegistrationRequest,
    ConfirmPasswordResetTokenRequest,
    DeviceInfo,
    ForgotPasswordRequest,
    GenerateOtpRequest,
    GeneratePasswordRequest,
    LoginRequest,
    OtpSentResponse,
    PasswordResetTokenRequest,
    PasswordResetTokenValidResponse,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    ResetForgotPasswordRequest,
    SocialLoginRequest,
    UserProfileResponse,
    VerifyOtpRequest,
)
from src.schemas.common_schemas import ErrorResponse, MessageResponse

router = APIRouter(prefix="/auth", tags=["Auth"])

_ERRORS: dict[int | str, dict[str, object]] = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    401: {"description": "Authentication failed", "model": ErrorResponse},
    403: {"description": "Forbidden", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
    409: {"description": "Conflict", "model": ErrorResponse},
}


def _error_response(request: Request, error: DomainError) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(error, request)


def _device(data: DeviceInfo) -> DeviceContext:
    return DeviceContext(
        os=data.os,
        device_id=data.device_id,
        latitude=data.latitude,
        longitude=data.longitude,
    )


# =============================================================================
# Login / registration
# =============================================================================


@router.post(
    "/login",
    response_model=AuthTokensResponse,
    responses=_ERRORS,
    summary="Credentials login",
    description="Authenticate with email or phone and password; opens a session.",
)
async def login(
    request: Request,
    data: LoginRequest,
    handler: LoginUserHandler = Depends(get_login_user_handler),
) -> AuthTokensResponse | JSONResponse:
    """Log in with credentials.

    POST /api/v1/auth/login → 200 OK

    Returns:
        AuthTokensResponse on success.
        JSONResponse 400 for malformed contact or invalid credentials.
    """
    command = LoginUser(
        email_or_phone=data.email_or_phone,
        password=data.password,
        device=_device(data),
    )
    result = await handler.handle(command)

    match result:
        case Success(value=auth_session):
            return AuthTokensResponse.from_auth_session(auth_session)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/social-login",
    response_model=AuthTokensResponse,
    responses=_ERRORS,
    summary="Social login",
    description="Verify a Google, Apple or Facebook token; links or creates the user.",
)
async def social_login(
    request: Request,
    data: SocialLoginRequest,
    handler: SocialLoginHandler = Depends(get_social_login_handler),
) -> AuthTokensResponse | JSONResponse:
    """Log in with a social provider token.

    POST /api/v1/auth/social-login → 200 OK
    """
    command = SocialLogin(
        login_type=data.login_type,
        token=data.token,
        device=_device(data),
    )
    result = await handler.handle(command)

    match result:
        case Success(value=auth_session):
            return AuthTokensResponse.from_auth_session(auth_session)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses=_ERRORS,
    summary="Register",
    description="Create a user identified by email or phone.",
)
async def register(
    request: Request,
    data: RegisterRequest,
    handler: RegisterUserHandler = Depends(get_register_user_handler),
) -> RegisterResponse | JSONResponse:
    """Create a user.

    POST /api/v1/auth/register → 201 Created

    Returns:
        RegisterResponse with the new user's id.
        JSONResponse 400 (malformed contact) or 409 (contact taken).
    """
    command = RegisterUser(
        email_or_phone=data.email_or_phone,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    result = await handler.handle(command)

    match result:
        case Success(value=user_id):
            return RegisterResponse(id=user_id)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/register/social",
    response_model=UserProfileResponse,
    responses=_ERRORS,
    summary="Complete social registration",
)
async def complete_social_registration(
    request: Request,
    data: CompleteSocialRegistrationRequest,
    current_user: CurrentUserDep,
    handler: CompleteSocialRegistrationHandler = Depends(
        get_complete_social_registration_handler
    ),
) -> UserProfileResponse | JSONResponse:
    """Set names and an optional phone after a social login."""
    command = CompleteSocialRegistration(
        user_id=current_user.user.id,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
    )
    result = await handler.handle(command)

    match result:
        case Success(value=profile):
            return UserProfileResponse.from_profile(profile)
        case Failure(error=error):
            return _error_response(request, error)


# =============================================================================
# Session lifecycle
# =============================================================================


@router.post(
    "/token/refresh",
    response_model=AuthTokensResponse,
    responses=_ERRORS,
    summary="Refresh tokens",
    description=(
        "Send the expired access token as bearer and the refresh token in the "
        "body. Both tokens are rotated. An expired refresh token is rejected "
        "with 403 and its session is removed."
    ),
)
async def refresh_token(
    request: Request,
    data: RefreshTokenRequest,
    access_token: AccessToken,
    handler: RefreshTokenHandler = Depends(get_refresh_token_handler),
) -> AuthTokensResponse | JSONResponse:
    """Exchange an expired access token plus refresh token for a new pair.

    POST /api/v1/auth/token/refresh → 200 OK

    Returns:
        AuthTokensResponse with the rotated pair.
        JSONResponse 401 when the access token is still live or the pair does
        not match a session.
        JSONResponse 403 when the refresh token expired (the session is removed).
        JSONResponse 409 when a concurrent refresh rotated the session first.
    """
    command = RefreshTokens(access_token=access_token, refresh_token=data.refresh_token)
    result = await handler.handle(command)

    match result:
        case Success(value=auth_session):
            return AuthTokensResponse.from_auth_session(auth_session)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Logout",
)
async def logout(
    request: Request,
    access_token: AccessToken,
    handler: LogoutUserHandler = Depends(get_logout_user_handler),
) -> MessageResponse | JSONResponse:
    """Delete the session holding the bearer token."""
    result = await handler.handle(LogoutUser(access_token=access_token))

    match result:
        case Success(value=response):
            return MessageResponse(message=response.message)
        case Failure(error=error):
            return _error_response(request, error)


@router.get(
    "/me",
    response_model=UserProfileResponse,
    responses=_ERRORS,
    summary="Current user",
)
async def me(current_user: CurrentUserDep) -> UserProfileResponse:
    """Profile of the caller."""
    return UserProfileResponse.from_profile(to_user_profile(current_user.user))


# =============================================================================
# Passwords
# =============================================================================


@router.post(
    "/password/forgot",
    response_model=OtpSentResponse,
    responses=_ERRORS,
    summary="Forgot password",
    description="Send a one-time code (email link or SMS) for a password reset.",
)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    handler: ForgotPasswordHandler = Depends(get_forgot_password_handler),
) -> OtpSentResponse | JSONResponse:
    """Issue a FORGOT_PASSWORD code."""
    result = await handler.handle(ForgotPassword(email_or_phone=data.email_or_phone))

    match result:
        case Success(value=issued):
            return OtpSentResponse.from_issued(issued)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/password/forgot/reset",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Reset forgotten password",
)
async def reset_forgot_password(
    request: Request,
    data: ResetForgotPasswordRequest,
    handler: ResetForgotPasswordHandler = Depends(get_reset_forgot_password_handler),
) -> MessageResponse | JSONResponse:
    """Redeem the code; every session of the user is revoked."""
    command = ResetForgotPassword(code=data.code, new_password=data.new_password)
    result = await handler.handle(command)

    match result:
        case Success():
            return MessageResponse(message="Password has been reset")
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/password/reset-token",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Request password reset link",
)
async def request_password_reset_token(
    request: Request,
    data: PasswordResetTokenRequest,
    handler: RequestPasswordResetTokenHandler = Depends(
        get_request_password_reset_token_handler
    ),
) -> MessageResponse | JSONResponse:
    """Email a single-use reset link."""
    result = await handler.handle(RequestPasswordResetToken(email=data.email))

    match result:
        case Success():
            return MessageResponse(message="Password reset email sent")
        case Failure(error=error):
            return _error_response(request, error)


@router.get(
    "/password/reset-token/{token}",
    response_model=PasswordResetTokenValidResponse,
    responses=_ERRORS,
    summary="Validate password reset link",
)
async def validate_password_reset_token(
    request: Request,
    token: Annotated[str, Path(min_length=4, max_length=32)],
    handler: ValidatePasswordResetTokenHandler = Depends(
        get_validate_password_reset_token_handler
    ),
) -> PasswordResetTokenValidResponse | JSONResponse:
    """Check a reset link before showing the new-password form.

    Returns:
        PasswordResetTokenValidResponse when the token is usable.
        JSONResponse 400 reset_token_invalid for unknown, expired or used tokens.
    """
    result = await handler.handle(ValidatePasswordResetToken(token=token))

    match result:
        case Success():
            return PasswordResetTokenValidResponse()
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/password/reset-token/confirm",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Reset password with link token",
)
async def confirm_password_reset_token(
    request: Request,
    data: ConfirmPasswordResetTokenRequest,
    handler: ConfirmPasswordResetTokenHandler = Depends(
        get_confirm_password_reset_token_handler
    ),
) -> MessageResponse | JSONResponse:
    """Consume the link token; every session of the user is revoked."""
    command = ConfirmPasswordResetToken(token=data.token, new_password=data.new_password)
    result = await handler.handle(command)

    match result:
        case Success():
            return MessageResponse(message="Password has been reset")
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/password/change",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Change password",
)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    current_user: CurrentUserDep,
    handler: ChangePasswordHandler = Depends(get_change_password_handler),
) -> MessageResponse | JSONResponse:
    command = ChangePassword(
        user_id=current_user.user.id,
        old_password=data.old_password,
        new_password=data.new_password,
    )
    result = await handler.handle(command)

    match result:
        case Success():
            return MessageResponse(message="Password changed")
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/password/generate",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Set first password",
    description="Social-only accounts set a password to enable credentials login.",
)
async def generate_password(
    request: Request,
    data: GeneratePasswordRequest,
    current_user: CurrentUserDep,
    handler: GeneratePasswordHandler = Depends(get_generate_password_handler),
) -> MessageResponse | JSONResponse:
    command = GeneratePassword(
        user_id=current_user.user.id, new_password=data.new_password
    )
    result = await handler.handle(command)

    match result:
        case Success():
            return MessageResponse(message="Password created")
        case Failure(error=error):
            return _error_response(request, error)


# =============================================================================
# Contact verification
# =============================================================================


@router.post(
    "/otp",
    response_model=OtpSentResponse,
    responses=_ERRORS,
    summary="Send verification code",
)
async def generate_otp(
    request: Request,
    data: GenerateOtpRequest,
    current_user: CurrentUserDep,
    handler: GenerateOtpHandler = Depends(get_generate_otp_handler),
) -> OtpSentResponse | JSONResponse:
    """Send a code to the caller's own email or phone."""
    command = GenerateOtp(
        user_id=current_user.user.id, email_or_phone=data.email_or_phone
    )
    result = await handler.handle(command)

    match result:
        case Success(value=issued):
            return OtpSentResponse.from_issued(issued)
        case Failure(error=error):
            return _error_response(request, error)


@router.post(
    "/otp/verify",
    response_model=UserProfileResponse,
    responses=_ERRORS,
    summary="Verify contact",
)
async def verify_otp(
    request: Request,
    data: VerifyOtpRequest,
    current_user: CurrentUserDep,
    handler: VerifyOtpHandler = Depends(get_verify_otp_handler),
) -> UserProfileResponse | JSONResponse:
    command = VerifyOtp(
        user_id=current_user.user.id,
        email_or_phone=data.email_or_phone,
        code=data.code,
    )
    result = await handler.handle(command)

    match result:
        case Success(value=profile):
            return UserProfileResponse.from_profile(profile)
        case Failure(error=error):
            return _error_response(request, error)
