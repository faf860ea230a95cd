"""
In-memory TTL cache for Notion user → Discord user mappings.

Entries expire on their own; a background task calls `cleanup_expired`
so the dict does not grow with users that are never looked up again.
For multi-instance deployments, swap in Redis or similar behind the same
async get/put interface.
"""

from __future__ import annotations

import time
from collections.abc import Callable


class IdentityCache:
    """
    Async key/value store with per-entry expiry.

    An entry is served only while `now < expires_at`.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        # key -> (value, expires_at)
        self._entries: dict[str, tuple[str, float]] = {}
        self._clock = clock

    async def get(self, key: str) -> str | None:
        """
        Get a live value.

        Args:
            key: Notion user ID

        Returns:
            Cached Discord user ID, or None if absent or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Store a value. Last write wins.

        Args:
            key: Notion user ID
            value: Discord user ID
            ttl_seconds: Seconds until the entry expires
        """
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def cleanup_expired(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


# Global identity cache instance
identity_cache = IdentityCache()
