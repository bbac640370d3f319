"""Plain-text templates for outbound codes and links.

One-time codes reach the user through these messages only; callers pass a
builder into OtpService.issue so the code never leaves the service as data.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """Subject is used for email and ignored for SMS."""

    subject: str
    body: str


def _greeting(name: str | None) -> str:
    return f"Hello {name}," if name else "Hello,"


def forgot_password_message(
    reset_url: str, name: str | None, valid_minutes: int
) -> OutboundMessage:
    return OutboundMessage(
        subject="Forgot Password",
        body=(
            f"{_greeting(name)}\n\n"
            "We've received a request to reset your password.\n\n"
            "To proceed, please open the link below:\n\n"
            f"{reset_url}\n\n"
            f"This link expires in {valid_minutes} minute(s).\n"
            "If you didn't request a password reset, please ignore this message.\n"
        ),
    )


def password_reset_link_message(
    reset_url: str, name: str | None, valid_minutes: int
) -> OutboundMessage:
    return OutboundMessage(
        subject="Password Reset",
        body=(
            f"{_greeting(name)}\n\n"
            "You have requested to reset your password. "
            "Please click the link below to reset your password:\n\n"
            f"{reset_url}\n\n"
            f"This link will expire in {valid_minutes} minute(s) for security purposes.\n\n"
            "If you did not request this password reset, please ignore this email.\n"
        ),
    )


def verification_code_message(
    code: str, name: str | None, valid_minutes: int
) -> OutboundMessage:
    return OutboundMessage(
        subject="Your verification code",
        body=(
            f"{_greeting(name)}\n\n"
            f"Your verification code is: {code}\n\n"
            f"It expires in {valid_minutes} minute(s).\n"
        ),
    )
