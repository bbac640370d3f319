"""Application services shared by several handlers."""

from src.application.services.message_templates import OutboundMessage
from src.application.services.otp_service import MessageBuilder, OtpPolicy, OtpService
from src.application.services.session_service import SessionService

__all__ = [
    "MessageBuilder",
    "OtpPolicy",
    "OtpService",
    "OutboundMessage",
    "SessionService",
]
