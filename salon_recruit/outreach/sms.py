"""Twilio SMS delivery over the REST API."""
from typing import Protocol

import httpx
import structlog

from salon_recruit.config import settings

logger = structlog.get_logger()


class SmsDeliveryError(Exception):
    """The provider did not accept the message."""


class SmsSender(Protocol):
    async def send(self, to: str, body: str) -> str | None:
        """Send *body* to *to*; return the provider message id."""
        ...


class TwilioSmsSender:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str = "",
        messaging_service_sid: str = "",
        base_url: str = "https://api.twilio.com/2010-04-01",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not from_number and not messaging_service_sid:
            raise ValueError("Set TWILIO_FROM or TWILIO_MESSAGING_SERVICE_SID")
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.messaging_service_sid = messaging_service_sid
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/Accounts/{self.account_sid}/Messages.json"

    async def send(self, to: str, body: str) -> str | None:
        form = {"To": to, "Body": body}
        if self.messaging_service_sid:
            form["MessagingServiceSid"] = self.messaging_service_sid
        else:
            form["From"] = self.from_number

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    self.messages_url,
                    data=form,
                    auth=(self.account_sid, self.auth_token),
                )
        except httpx.HTTPError as e:
            raise SmsDeliveryError(f"SMS provider unreachable: {e}") from e

        if resp.status_code >= 400:
            try:
                reason = resp.json().get("message")
            except ValueError:
                reason = None
            raise SmsDeliveryError(reason or f"SMS provider returned {resp.status_code}")

        return resp.json().get("sid")


def get_sms_sender() -> SmsSender | None:
    """FastAPI dependency; None when Twilio credentials are missing."""
    if not settings.sms_configured:
        logger.warning("twilio_not_configured")
        return None
    return TwilioSmsSender(
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        from_number=settings.TWILIO_FROM,
        messaging_service_sid=settings.TWILIO_MESSAGING_SERVICE_SID,
        base_url=settings.TWILIO_API_BASE_URL,
    )
