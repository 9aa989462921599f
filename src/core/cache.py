"""In-memory expiring cache with independent namespaces.

Each namespace has its own default TTL and its own lock. Entries expire
lazily: an expired entry is dropped the next time it is read, there is no
background sweep and no size bound.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

PROFILE = "profile"
SEARCH = "search"

DEFAULT_TTLS: Mapping[str, float] = {
    PROFILE: 2 * 60 * 60,
    SEARCH: 10 * 60,
}


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    # Stores value + monotonic expiration time
    value: T
    expires_at: float  # time.monotonic()


class TTLCache(Generic[T]):
    # One key space with a default TTL; safe to share between threads and tasks
    def __init__(self, *, ttl_seconds: float, clock: Optional[Callable[[], float]] = None) -> None:
        self._ttl = float(ttl_seconds)
        self._clock = clock or time.monotonic
        self._store: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            # Expired entries are dropped on read, never returned
            if self._clock() >= entry.expires_at:
                self._store.pop(key, None)
                return None

            return entry.value

    def set(self, key: str, value: T, *, ttl_seconds: Optional[float] = None) -> None:
        ttl = self._ttl if ttl_seconds is None else float(ttl_seconds)
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class ExpiringCache:
    """Namespaced TTL cache shared by the GitHub client and the aggregator.

    Built once at startup and passed to the components that need it.
    """

    def __init__(
        self,
        ttls: Optional[Mapping[str, float]] = None,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._namespaces: Dict[str, TTLCache[object]] = {
            name: TTLCache(ttl_seconds=ttl, clock=clock) for name, ttl in dict(ttls or DEFAULT_TTLS).items()
        }

    def namespace(self, name: str) -> TTLCache[object]:
        try:
            return self._namespaces[name]
        except KeyError:
            raise KeyError(f"Unknown cache namespace: {name}") from None

    def get(self, namespace: str, key: str) -> Optional[object]:
        return self.namespace(namespace).get(key)

    def set(self, namespace: str, key: str, value: object, ttl: Optional[float] = None) -> None:
        self.namespace(namespace).set(key, value, ttl_seconds=ttl)
