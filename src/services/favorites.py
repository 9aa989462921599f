from __future__ import annotations

from typing import Any, Dict, List

from core.errors import ValidationError
from core.interfaces import PasscodeStore
from services.aggregator import ProfileAggregator


class FavoritesService:
    """Favorite GitHub users per phone number, hydrated through the aggregator."""

    def __init__(self, *, store: PasscodeStore, aggregator: ProfileAggregator) -> None:
        self._store = store
        self._aggregator = aggregator

    async def like_user(self, phone: str, user_id: str) -> None:
        phone_clean = (phone or "").strip()
        user_clean = (user_id or "").strip()
        if not phone_clean or not user_clean:
            raise ValidationError("Phone number and GitHub user ID are required")
        await self._store.like(phone_clean, user_clean)

    async def get_favorites(
        self,
        phone: str,
        *,
        page: int = 0,
        limit: int = 0,
        basic: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return favorite profiles (or id stubs when `basic`).

        Pagination applies only when both page and limit are positive.
        """
        phone_clean = (phone or "").strip()
        if not phone_clean:
            raise ValidationError("Phone number is required")

        ids = await self._store.get_favorites(phone_clean)
        if not ids:
            return []

        if page > 0 and limit > 0:
            start = (page - 1) * limit
            ids = ids[start : start + limit]

        if basic:
            return [{"id": i, "login": i} for i in ids]

        records = await self._aggregator.resolve_all(ids)
        return [r.to_dict() for r in records]
