"""
Memory store implementations for static_shared.
"""
import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..types import SharedContentStore


@dataclass
class MemoryStoreStats:
    """Memory store statistics."""

    entries: int
    size_bytes: int
    max_size_bytes: int
    max_entries: int
    utilization_percent: float


class MemorySharedContentStore(SharedContentStore):
    """
    In-memory content store with LRU eviction.

    Entries never expire; a new version produces a new key.
    """

    def __init__(
        self,
        max_size: int = 100 * 1024 * 1024,  # 100MB default
        max_entries: int = 1000,
    ) -> None:
        self._cache: "OrderedDict[str, bytes]" = OrderedDict()
        self._current_size: int = 0
        self._max_size = max_size
        self._max_entries = max_entries

    def _delete_entry(self, key: str) -> bool:
        """Delete an entry and update size tracking."""
        value = self._cache.pop(key, None)
        if value is None:
            return False
        self._current_size -= len(value)
        return True

    def _evict_if_needed(self, required_size: int) -> None:
        """Evict least recently used entries to make room."""
        while self._current_size + required_size > self._max_size and self._cache:
            oldest_key = next(iter(self._cache))
            self._delete_entry(oldest_key)

        while self._cache and len(self._cache) >= self._max_entries:
            oldest_key = next(iter(self._cache))
            self._delete_entry(oldest_key)

    async def get(self, key: str) -> Optional[bytes]:
        """Get content by cache key."""
        value = self._cache.get(key)
        if value is None:
            return None

        self._cache.move_to_end(key)
        return value

    async def set(self, key: str, value: bytes) -> None:
        """Store content under a cache key."""
        size = len(value)

        # Too large to ever fit
        if size > self._max_size:
            return

        self._delete_entry(key)
        self._evict_if_needed(size)

        self._cache[key] = value
        self._current_size += size

    async def has(self, key: str) -> bool:
        """Check if a key exists."""
        return key in self._cache

    async def delete(self, key: str) -> bool:
        """Delete stored content."""
        return self._delete_entry(key)

    async def clear(self) -> None:
        """Clear all stored content."""
        self._cache.clear()
        self._current_size = 0

    async def size(self) -> int:
        """Get number of stored entries."""
        return len(self._cache)

    async def keys(self) -> List[str]:
        """Get all keys, least recently used first."""
        return list(self._cache.keys())

    def get_stats(self) -> MemoryStoreStats:
        """Get store statistics."""
        return MemoryStoreStats(
            entries=len(self._cache),
            size_bytes=self._current_size,
            max_size_bytes=self._max_size,
            max_entries=self._max_entries,
            utilization_percent=(self._current_size / self._max_size) * 100
            if self._max_size > 0
            else 0,
        )


class MemorySingleflightStore:
    """
    In-memory registry of in-flight builds keyed by cache key.
    """

    def __init__(self) -> None:
        self._in_flight: Dict[str, "asyncio.Future[bytes]"] = {}

    def get(self, key: str) -> Optional["asyncio.Future[bytes]"]:
        """Get the in-flight build for a key."""
        return self._in_flight.get(key)

    def set(self, key: str, future: "asyncio.Future[bytes]") -> None:
        """Register an in-flight build."""
        self._in_flight[key] = future

    def delete(self, key: str) -> bool:
        """Remove an in-flight build."""
        return self._in_flight.pop(key, None) is not None

    def has(self, key: str) -> bool:
        """Check if a build is in-flight."""
        return key in self._in_flight

    def size(self) -> int:
        """Get current number of in-flight builds."""
        return len(self._in_flight)

    def clear(self) -> None:
        """Clear all in-flight builds."""
        self._in_flight.clear()


def create_memory_store(
    max_size: int = 100 * 1024 * 1024,
    max_entries: int = 1000,
) -> MemorySharedContentStore:
    """Create a memory content store."""
    return MemorySharedContentStore(max_size=max_size, max_entries=max_entries)
