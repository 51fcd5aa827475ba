"""Small in-process TTL cache for hot read paths.

Used for the task list and the leaderboard snapshot so repeated page loads
do not hit the database. Entries expire on read.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

DEFAULT_TTL = 5 * 60


class TTLCache:
    def __init__(
        self,
        prefix: str = "ambassador:",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def _key(self, key: str) -> str:
        return self._prefix + key

    def get(self, key: str) -> Optional[Any]:
        """Return cached data if present and not expired."""

        full_key = self._key(key)
        with self._lock:
            entry = self._entries.get(full_key)
            if entry is None:
                return None
            data, expiry = entry
            if self._clock() > expiry:
                del self._entries[full_key]
                return None
            return data

    def set(self, key: str, data: Any, ttl: float = DEFAULT_TTL) -> None:
        with self._lock:
            self._entries[self._key(key)] = (data, self._clock() + ttl)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(self._key(key), None)

    def invalidate_prefix(self, prefix: str) -> None:
        full_prefix = self._key(prefix)
        with self._lock:
            for key in [k for k in self._entries if k.startswith(full_prefix)]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


cache = TTLCache()

LEADERBOARD_KEY = "leaderboard_top"
TASKS_KEY = "tasks_all"


__all__ = ["DEFAULT_TTL", "LEADERBOARD_KEY", "TASKS_KEY", "TTLCache", "cache"]
