"""Stub email service for development and testing.

Logs outgoing mail instead of sending it. Nothing is retained: the body is
neither stored nor logged because it carries one-time codes and reset links.
"""

from uuid_extensions import uuid7

from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.protocols import LoggerProtocol


class StubEmailService:
    """EmailServiceProtocol implementation that never leaves the process."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def send_email(
        self, to_email: str, subject: str, body: str
    ) -> Result[str, DomainError]:
        """Log the envelope and return a generated message id."""
        message_id = f"stub-{uuid7()}"
        self._logger.info(
            "email_sent_stub",
            message_id=message_id,
            to_email=to_email,
            subject=subject,
            body_length=len(body),
        )
        return Success(value=message_id)
