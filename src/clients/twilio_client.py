from __future__ import annotations

import logging

import httpx

from core.errors import ExternalServiceError, ValidationError
from core.interfaces import SmsReceipt

logger = logging.getLogger(__name__)


class TwilioSmsSender:
    BASE_URL = "https://api.twilio.com"

    def __init__(
        self,
        *,
        account_sid: str = "",
        auth_token: str = "",
        from_number: str = "",
        timeout: float = 20.0,
        verify: bool = True,
        base_url: str = BASE_URL,
    ) -> None:
        self._account_sid = (account_sid or "").strip()
        self._auth_token = (auth_token or "").strip()
        self._from_number = (from_number or "").strip()
        self._timeout = timeout
        self._verify = verify
        self._base_url = (base_url or self.BASE_URL).rstrip("/")

        if self.is_configured:
            logger.info("Twilio client configured")
        else:
            logger.warning("Twilio credentials not configured or invalid; SMS messages will be mocked")
            if self._account_sid and not self._account_sid.startswith("AC"):
                logger.error('TWILIO_ACCOUNT_SID must start with "AC"')

    @property
    def is_configured(self) -> bool:
        return bool(
            self._account_sid.startswith("AC") and self._auth_token and self._from_number
        )

    async def send(self, phone: str, message: str) -> SmsReceipt:
        to = (phone or "").strip()
        if not to:
            raise ValidationError("Phone number is required")

        if not self.is_configured:
            logger.info("[MOCK SMS] to=%s message=%r", to, message)
            return SmsReceipt(success=True, mock=True)

        url = f"{self._base_url}/2010-04-01/Accounts/{self._account_sid}/Messages.json"

        try:
            async with httpx.AsyncClient(timeout=self._timeout, verify=self._verify) as c:
                r = await c.post(
                    url,
                    data={"To": to, "From": self._from_number, "Body": message},
                    auth=(self._account_sid, self._auth_token),
                )
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Twilio returned an error: {e}") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Failed to call Twilio: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Twilio returned invalid JSON") from e

        if not isinstance(body, dict):
            raise ExternalServiceError("Malformed Twilio response payload")
        sid = body.get("sid")

        logger.info("SMS sent to %s, message SID %s", to, sid)
        return SmsReceipt(success=True, sid=sid)
