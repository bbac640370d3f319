"""Stub SMS transport used when Twilio credentials are not configured.

Only the recipient and a generated message id are logged; the body holds
the one-time code and is dropped.
"""

from uuid_extensions import uuid7

from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.protocols import LoggerProtocol


class StubSmsService:
    """SmsServiceProtocol implementation that logs instead of sending."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def send_sms(self, to_phone: str, body: str) -> Result[str, DomainError]:
        message_id = f"stub-{uuid7()}"
        self._logger.info("sms_sent_stub", message_id=message_id, to_phone=to_phone)
        return Success(value=message_id)
