"""
In-Memory Calculation Cache

Process-local TTL cache. Entries expire lazily on read.
"""

import time
from typing import Any, Callable, Optional

from finplan.services.cache.interface import CalculationCacheInterface


class InMemoryCalculationCache(CalculationCacheInterface):
    """
    Dictionary-backed cache.

    Args:
        clock: Monotonic time source in seconds; injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    async def delete_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)
