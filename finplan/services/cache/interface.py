"""
Calculation Cache Interface

DESIGN DECISION: Caching is advisory. A backend failure is reported as a
CacheError, which the orchestration layer logs before recomputing. A cache
must never be the reason a calculation fails.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CalculationCacheInterface(ABC):
    """Abstract key/value store for serialized calculation results."""

    @abstractmethod
    async def get(self, key: str) -> Optional[dict[str, Any]]:
        """
        Fetch a cached value.

        Returns:
            The stored value, or None on a miss or an expired entry
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        """
        Store a value for `ttl_seconds`.

        Args:
            key: Cache key
            value: Serialized result (a model_dump() dict)
            ttl_seconds: Lifetime of the entry
        """
        pass

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """
        Remove every entry whose key starts with `prefix`.

        Returns:
            Number of entries removed
        """
        pass


class CacheError(Exception):
    """Cache backend failure."""
    pass
