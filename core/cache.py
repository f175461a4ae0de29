# core/cache.py

"""
In-memory TTL cache for building membership decisions.

Process-local: each worker keeps its own copy, so a membership change
can take up to MEMBERSHIP_CACHE_TTL_SECONDS to be seen everywhere
unless the writer calls invalidate_membership().
"""

from typing import Optional, Any
from datetime import datetime, timedelta
from threading import Lock
from core.logging_config import logger


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at


class SimpleCache:
    """
    Simple in-memory cache with TTL support.

    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int = 300):
        with self._lock:
            self._cache[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def clear(self):
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


# Global cache instance
_cache = SimpleCache()


def get_cache() -> SimpleCache:
    """Get the global cache instance."""
    return _cache


# -----------------------------------------------------
# Membership keys
# -----------------------------------------------------
def committee_key(user_id: str, building_id: str) -> str:
    return f"committee:{user_id}:{building_id}"


def building_member_key(user_id: str, building_id: str) -> str:
    return f"building-member:{user_id}:{building_id}"


def invalidate_membership(user_id: str, building_id: str):
    """
    Drop cached membership decisions for one user/building pair.
    Call after adding or removing committee members, owners or tenants.
    """
    _cache.delete(committee_key(user_id, building_id))
    _cache.delete(building_member_key(user_id, building_id))
    logger.debug(f"Membership cache invalidated: {user_id}@{building_id}")


def cache_clear():
    """Clear all cache entries."""
    _cache.clear()
