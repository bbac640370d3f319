"""SMS transports."""

from src.infrastructure.sms.stub_sms_service import StubSmsService
from src.infrastructure.sms.twilio_sms_service import TwilioSmsService

__all__ = [
    "StubSmsService",
    "TwilioSmsService",
]
