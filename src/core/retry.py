"""Bounded retry for rate-limited upstream calls.

Only RateLimitedError is retried. The delay before attempt k (k >= 1) is
min(base_delay * k, max_delay); once max_attempts calls have been rate
limited the last RateLimitedError is raised. Every other error is raised
after a single attempt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from core.errors import RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimitRetry:
    def __init__(
        self,
        *,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        max_delay: float = 10.0,
    ) -> None:
        self._max_attempts = max(1, int(max_attempts))
        self._base_delay = max(0.0, float(base_delay))
        self._max_delay = max(0.0, float(max_delay))

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def delay_for(self, attempt: int) -> float:
        # Linear, capped: 2s, 4s, 6s ... never above max_delay
        return min(self._base_delay * attempt, self._max_delay)

    async def run(self, call: Callable[[], Awaitable[T]], *, label: str = "request") -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except RateLimitedError as e:
                attempt += 1
                if attempt >= self._max_attempts:
                    logger.warning("%s: rate limited after %d attempts, giving up", label, attempt)
                    raise

                delay = self.delay_for(attempt)
                logger.info(
                    "%s: rate limited (reset %s), retry %d/%d in %.1fs",
                    label,
                    e.reset_at_iso,
                    attempt,
                    self._max_attempts - 1,
                    delay,
                )
                await asyncio.sleep(delay)
