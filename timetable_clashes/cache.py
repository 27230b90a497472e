"""
Time-to-live cache for loaded grid documents and derived catalogs.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache:
    """
    Values expire ``ttl`` seconds after they were set.

    ``clock`` returns the current time in seconds; pass a fake one in tests.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable, now: Optional[float] = None) -> Tuple[Any, bool]:
        """Return (value, is_valid); a missing or expired entry gives (None, False)."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("cache miss: %s", key)
            return None, False
        value, stored_at = entry
        now = self.clock() if now is None else now
        if now - stored_at >= self.ttl:
            logger.debug("cache expired: %s", key)
            return value, False
        logger.debug("cache hit: %s", key)
        return value, True

    def set(self, key: Hashable, value: Any, now: Optional[float] = None) -> None:
        self._entries[key] = (value, self.clock() if now is None else now)

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or everything when ``key`` is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        value, valid = self.get(key)
        if valid:
            return value
        value = loader()
        self.set(key, value)
        return value
