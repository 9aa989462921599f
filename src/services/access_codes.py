from __future__ import annotations

import logging
import secrets

from core.errors import ValidationError
from core.interfaces import PasscodeStore, SmsSender

logger = logging.getLogger(__name__)


def generate_access_code() -> str:
    # Six digits, never a leading zero
    return str(100_000 + secrets.randbelow(900_000))


class AccessCodeService:
    """Create and check the one-time access codes sent by SMS."""

    def __init__(self, *, store: PasscodeStore, sms: SmsSender) -> None:
        self._store = store
        self._sms = sms

    async def create_access_code(self, phone: str) -> str:
        phone_clean = (phone or "").strip()
        if not phone_clean:
            raise ValidationError("Phone number is required")

        code = generate_access_code()
        await self._store.save(phone_clean, code)
        # SMS failure propagates: the caller must not believe a code was delivered
        await self._sms.send(phone_clean, f"Your access code is: {code}")
        return code

    async def validate_access_code(self, phone: str, code: str) -> bool:
        phone_clean = (phone or "").strip()
        code_clean = (code or "").strip()
        if not phone_clean or not code_clean:
            raise ValidationError("Phone number and access code are required")

        if not await self._store.validate(phone_clean, code_clean):
            return False

        # Codes are single use
        await self._store.clear(phone_clean)
        return True
