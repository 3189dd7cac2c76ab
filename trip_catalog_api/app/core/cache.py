"""
In‑memory cache with a fixed time to live.

``SimpleCache`` keeps at most one entry per key together with the
time it was stored.  An entry older than ``TTL_SECONDS`` is treated as
absent and dropped on the next ``get``.  There is no size bound; the
only ways out are expiry and explicit invalidation by the write paths.

One instance is created at application start‑up and handed to the
services that need it (see ``main.create_app``).  The cache carries no
authority over correctness: dropping it at any time is always safe.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional


logger = logging.getLogger(__name__)

TTL_SECONDS = 5 * 60


class SimpleCache:
    """Thread‑safe key/value store with per‑entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.ttl = TTL_SECONDS

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` with the current time.

        A failure is logged and the value simply stays uncached.
        """
        try:
            with self._lock:
                self._entries[key] = (value, self._clock())
        except Exception:
            logger.warning("Cache store for %s failed, value not cached", key, exc_info=True)
            return
        logger.info("Cache SET: %s", key)

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` when missing or expired.

        Expired entries are removed as a side effect, so a later call
        cannot bring them back.  Any internal fault is logged and
        reported as a miss.
        """
        try:
            with self._lock:
                item = self._entries.get(key)
                if item is None:
                    logger.info("Cache MISS: %s", key)
                    return None
                value, timestamp = item
                if self._clock() - timestamp > self.ttl:
                    del self._entries[key]
                    logger.info("Cache EXPIRED: %s", key)
                    return None
        except Exception:
            logger.warning("Cache lookup for %s failed, treating as miss", key, exc_info=True)
            return None
        logger.info("Cache HIT: %s", key)
        return value

    def clear(self, key: str) -> None:
        """Remove the entry for ``key`` if present.  Never raises."""
        try:
            with self._lock:
                removed = self._entries.pop(key, None) is not None
        except Exception:
            logger.warning("Cache clear for %s failed", key, exc_info=True)
            return
        if removed:
            logger.info("Cache CLEARED: %s", key)

    def clear_all(self) -> None:
        try:
            with self._lock:
                self._entries.clear()
        except Exception:
            logger.warning("Cache clear failed", exc_info=True)
            return
        logger.info("Cache CLEARED ALL")

    def stats(self) -> Dict[str, Any]:
        """Return the number of entries and their keys (expired ones included)."""
        with self._lock:
            keys: List[str] = list(self._entries.keys())
        return {"size": len(keys), "keys": keys}
