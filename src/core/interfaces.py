"""Core protocol definitions for the external collaborators.

The passcode store keeps one document per phone number (current access
code + favorite GitHub users). The SMS sender delivers the access code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class SmsReceipt:
    success: bool
    sid: Optional[str] = None
    mock: bool = False


class PasscodeStore(Protocol):
    """Contract for access-code and favorites persistence."""
    async def save(self, phone: str, code: str) -> None:
        ...

    async def validate(self, phone: str, code: str) -> bool:
        ...

    async def clear(self, phone: str) -> None:
        ...

    async def like(self, phone: str, user_id: str) -> None:
        ...

    async def get_favorites(self, phone: str) -> List[str]:
        ...


class SmsSender(Protocol):
    async def send(self, phone: str, message: str) -> SmsReceipt:
        ...
