"""Time-based cache for search index responses."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class TTLCache:
    """In-memory cache whose entries expire ``ttl_seconds`` after being set.

    Construct one per process and hand it to whatever needs it; the clock is
    injectable so expiry can be tested without sleeping. Routes call into the
    cache from worker threads, so every access holds the lock.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            stored_at, value = entry
            age = self._clock() - stored_at
            if age >= self.ttl_seconds:
                self._entries.pop(key, None)
                return None

        logger.debug("Cache hit", extra={"key": key, "age_s": round(age)})
        return value

    def set(self, key: str, value: Any) -> None:
        """Store a value and drop every entry that has already expired."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = (now, value)

    def _sweep(self, now: float) -> None:
        expired = [
            key
            for key, (stored_at, _) in self._entries.items()
            if now - stored_at >= self.ttl_seconds
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(
                "Expired cache entries dropped", extra={"count": len(expired)}
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Search cache cleared")

    def stats(self) -> dict:
        with self._lock:
            return {"size": len(self._entries), "entries": list(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
