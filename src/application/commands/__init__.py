"""Commands - Write operations that change state.

Commands represent user intent to perform an action. They are immutable
dataclasses with imperative names (RegisterUser, ChangePassword).

Each command has a corresponding handler that contains the business logic
to execute the command.
"""

from src.application.commands.auth_commands import (
    CompleteSocialRegistration,
    DeviceContext,
    LoginUser,
    LogoutUser,
    RefreshTokens,
    RegisterUser,
    SocialLogin,
)
from src.application.commands.otp_commands import GenerateOtp, VerifyOtp
from src.application.commands.password_commands import (
    ChangePassword,
    ConfirmPasswordResetToken,
    ForgotPassword,
    GeneratePassword,
    RequestPasswordResetToken,
    ResetForgotPassword,
    ValidatePasswordResetToken,
)

__all__ = [
    # Auth commands
    "CompleteSocialRegistration",
    "DeviceContext",
    "LoginUser",
    "LogoutUser",
    "RefreshTokens",
    "RegisterUser",
    "SocialLogin",
    # Password commands
    "ChangePassword",
    "ConfirmPasswordResetToken",
    "ForgotPassword",
    "GeneratePassword",
    "RequestPasswordResetToken",
    "ResetForgotPassword",
    "ValidatePasswordResetToken",
    # OTP commands
    "GenerateOtp",
    "VerifyOtp",
]
