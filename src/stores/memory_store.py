"""In-process PasscodeStore implementation.

One document per phone number holding the pending access code and the
ordered list of favorite GitHub users. Lost on restart.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class PhoneDocument:
    phone: str
    code: Optional[str] = None
    favorites: List[str] = field(default_factory=list)


class InMemoryPasscodeStore:
    def __init__(self) -> None:
        self._docs: Dict[str, PhoneDocument] = {}
        self._lock = asyncio.Lock()

    def _doc(self, phone: str) -> PhoneDocument:
        doc = self._docs.get(phone)
        if doc is None:
            doc = self._docs[phone] = PhoneDocument(phone=phone)
        return doc

    async def save(self, phone: str, code: str) -> None:
        async with self._lock:
            self._doc(phone).code = code
        logger.info("Access code saved for %s", phone)

    async def validate(self, phone: str, code: str) -> bool:
        async with self._lock:
            doc = self._docs.get(phone)
            if doc is None or doc.code is None:
                logger.info("No access code found for %s", phone)
                return False
            is_valid = doc.code == code
        logger.info("Access code validation for %s: %s", phone, is_valid)
        return is_valid

    async def clear(self, phone: str) -> None:
        async with self._lock:
            doc = self._docs.get(phone)
            if doc is not None:
                doc.code = None
        logger.info("Access code cleared for %s", phone)

    async def like(self, phone: str, user_id: str) -> None:
        async with self._lock:
            favorites = self._doc(phone).favorites
            if user_id in favorites:
                logger.debug("%s already in favorites of %s", user_id, phone)
                return
            favorites.append(user_id)
        logger.info("Added %s to favorites of %s", user_id, phone)

    async def get_favorites(self, phone: str) -> List[str]:
        async with self._lock:
            doc = self._docs.get(phone)
            return list(doc.favorites) if doc else []
