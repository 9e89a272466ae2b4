"""Time-bounded in-memory cache for expensive collection reads.

One cache per server lives for the life of the process. Nothing is
ever written to disk and write operations never go through it. Callers opt in
per call site; the uncached path always hits the server.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CACHE_TTL: Final[float] = 300.0


class _Missing:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Final = _Missing()
"""Returned by :meth:`ResourceCache.get` for absent or expired keys."""


@dataclass
class CacheEntry(Generic[T]):
    value: T
    ttl: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ResourceCache:
    """Keyed TTL cache with an injectable clock.

    The check-then-fetch-then-store sequence in :meth:`get_or_fetch` runs under
    a per-key lock, so concurrent callers sharing one cache trigger a single
    fetch and never observe a value paired with another entry's expiry.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl < 0:
            raise ValueError(f"Cache TTL must be >= 0, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    def _live_entry(self, key: str) -> CacheEntry[Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            logger.debug("Cache entry expired: %s", key)
            del self._entries[key]
            return None
        return entry

    def _store(self, key: str, value: Any, ttl: float | None) -> None:
        ttl = self.ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, ttl=ttl, expires_at=self._clock() + ttl)

    def get(self, key: str) -> Any:
        """Return the live value for *key*, or :data:`MISS`."""
        with self._lock_for(key):
            entry = self._live_entry(key)
            return MISS if entry is None else entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store *value*; it goes stale ``ttl`` seconds from now (default: cache TTL)."""
        with self._lock_for(key):
            self._store(key, value, ttl)

    def is_expired(self, key: str) -> bool:
        """True when *key* has no entry or its entry is stale."""
        with self._lock_for(key):
            entry = self._entries.get(key)
            return entry is None or entry.is_expired(self._clock())

    def get_or_fetch(self, key: str, fetch: Callable[[], T], ttl: float | None = None) -> T:
        """Serve a live entry, or call *fetch* once and cache its result."""
        with self._lock_for(key):
            entry = self._live_entry(key)
            if entry is not None:
                logger.debug("Cache hit: %s", key)
                return entry.value
            logger.debug("Cache miss: %s", key)
            value = fetch()
            self._store(key, value, ttl)
            return value

    def invalidate(self, key: str | None = None) -> None:
        """Drop one entry, or every entry when *key* is None."""
        if key is None:
            with self._locks_guard:
                keys = list(self._locks)
            for k in keys:
                with self._lock_for(k):
                    self._entries.pop(k, None)
            return
        with self._lock_for(key):
            self._entries.pop(key, None)
