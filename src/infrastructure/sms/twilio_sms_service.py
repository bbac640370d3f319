"""Twilio SMS transport (Messages REST API over httpx).

Sends the code we generated ourselves, so the stored digest stays the only
source of truth for verification.

Twilio responds 201 with the message resource; its ``sid`` becomes the
delivery receipt stored on the OTP record. Any other status, a timeout or a
connection error is a delivery failure. Provider response bodies are logged
truncated and never returned to clients.
"""

import httpx

from src.core.constants import RESPONSE_BODY_MAX_LENGTH, SOCIAL_HTTP_TIMEOUT_DEFAULT
from src.core.enums import ErrorCode
from src.core.errors import DomainError, InternalError
from src.core.result import Failure, Result, Success
from src.domain.protocols import LoggerProtocol


class TwilioSmsService:
    """SmsServiceProtocol implementation backed by Twilio.

    Example:
        >>> service = TwilioSmsService(
        ...     account_sid="AC...",
        ...     auth_token="...",
        ...     from_number="+15005550006",
        ...     logger=logger,
        ... )
        >>> result = await service.send_sms("+14155550100", "Your code is A1B2C3")
    """

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        from_number: str,
        logger: LoggerProtocol,
        base_url: str = "https://api.twilio.com/2010-04-01",
        timeout: float = SOCIAL_HTTP_TIMEOUT_DEFAULT,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._logger = logger
        self._url = f"{base_url.rstrip('/')}/Accounts/{account_sid}/Messages.json"
        self._timeout = timeout

    async def send_sms(self, to_phone: str, body: str) -> Result[str, DomainError]:
        """Send a text message through Twilio.

        Returns:
            Success(message sid) or Failure(InternalError) on any delivery failure.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    auth=(self._account_sid, self._auth_token),
                    data={"To": to_phone, "From": self._from_number, "Body": body},
                )
        except httpx.TimeoutException as e:
            self._logger.warning("twilio_sms_timeout", to_phone=to_phone, error=str(e))
            return Failure(error=_delivery_failed())
        except httpx.RequestError as e:
            self._logger.warning(
                "twilio_sms_connection_error", to_phone=to_phone, error=str(e)
            )
            return Failure(error=_delivery_failed())

        if response.status_code not in (200, 201):
            self._logger.warning(
                "twilio_sms_rejected",
                to_phone=to_phone,
                status_code=response.status_code,
                response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
            )
            return Failure(error=_delivery_failed())

        try:
            message_sid = response.json()["sid"]
        except (ValueError, KeyError, TypeError):
            self._logger.warning("twilio_sms_invalid_response", to_phone=to_phone)
            return Failure(error=_delivery_failed())

        self._logger.info("twilio_sms_sent", to_phone=to_phone, message_id=message_sid)
        return Success(value=message_sid)


def _delivery_failed() -> InternalError:
    return InternalError(
        code=ErrorCode.OTP_DELIVERY_FAILED,
        message="Failed to deliver message",
    )
