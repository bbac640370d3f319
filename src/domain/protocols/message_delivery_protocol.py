"""Outbound message transports (mail and SMS).

Following hexagonal architecture:
- Domain defines what it needs (protocol/port)
- Infrastructure provides implementation (adapter)

Both transports return the provider's message id on success so issued
one-time codes can be traced back to a delivery receipt.
"""

from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result


class EmailServiceProtocol(Protocol):
    """Protocol for email sending.

    Implementations:
        - StubEmailService: src/infrastructure/email/stub_email_service.py
    """

    async def send_email(
        self, to_email: str, subject: str, body: str
    ) -> Result[str, DomainError]:
        """Send a plain-text email.

        Returns:
            Success(message_id) or Failure(DomainError) if not accepted.
        """
        ...


class SmsServiceProtocol(Protocol):
    """Protocol for SMS sending.

    Implementations:
        - StubSmsService: src/infrastructure/sms/stub_sms_service.py
        - TwilioSmsService: src/infrastructure/sms/twilio_sms_service.py
    """

    async def send_sms(self, to_phone: str, body: str) -> Result[str, DomainError]:
        """Send a text message to an E.164 number.

        Returns:
            Success(message_id) or Failure(DomainError) if not accepted.
        """
        ...
