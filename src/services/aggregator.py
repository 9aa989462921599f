"""Fan-out resolution of many GitHub user ids into profiles.

Every id is looked up concurrently (cache first, then a retry-wrapped
fetch). The aggregation waits for all lookups to settle; failed ids are
logged and left out of the result, never raised. Results come back in
completion order, not request order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from clients.github import GitHubClient
from core.cache import PROFILE, ExpiringCache
from core.errors import GatewayError
from core.models import LookupOutcome, ProfileRecord
from core.retry import RateLimitRetry

logger = logging.getLogger(__name__)


class ProfileAggregator:
    def __init__(self, *, client: GitHubClient, cache: ExpiringCache, retry: RateLimitRetry) -> None:
        self._client = client
        self._cache = cache
        self._retry = retry

    async def resolve_all(self, ids: Sequence[str]) -> List[ProfileRecord]:
        outcomes = await self.resolve_outcomes(ids)
        return [o.record for o in outcomes if o.success and o.record is not None]

    async def resolve_outcomes(self, ids: Sequence[str]) -> List[LookupOutcome]:
        """Like resolve_all, but keeps the failed ids alongside the successes."""
        if not ids:
            return []

        tasks = [asyncio.ensure_future(self._lookup(str(i))) for i in ids]
        outcomes: List[LookupOutcome] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                outcomes.append(await next_done)
        finally:
            for t in tasks:
                if not t.done():
                    t.cancel()

        failed = [o.id for o in outcomes if not o.success]
        if failed:
            logger.warning("Resolved %d/%d profiles; dropped %s", len(ids) - len(failed), len(ids), failed)
        return outcomes

    async def _lookup(self, user_id: str) -> LookupOutcome:
        cached = self._cache.get(PROFILE, user_id)
        if isinstance(cached, ProfileRecord):
            return LookupOutcome(id=user_id, success=True, record=cached)

        try:
            record = await self._retry.run(
                lambda: self._client.fetch_profile(user_id),
                label=f"profile {user_id}",
            )
        except GatewayError as e:
            logger.warning("Error fetching GitHub user %s: %s", user_id, e)
            return LookupOutcome(id=user_id, success=False, error=e)
        except Exception as e:
            logger.exception("Unexpected error fetching GitHub user %s", user_id)
            return LookupOutcome(id=user_id, success=False, error=e)

        # Make later lookups by either id or login hit the cache
        self._cache.set(PROFILE, user_id, record)
        self._cache.set(PROFILE, record.login, record)
        return LookupOutcome(id=user_id, success=True, record=record)
