"""Capacity-bounded LRU cache with per-cache TTL.

Expired entries are not dropped on read: the ownership pipeline falls back to
them when upstream calls fail. They leave the cache through LRU eviction or an
explicit ``sweep``.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_MAX_ENTRIES = 1024


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """In-memory cache keyed by any hashable value.

    Args:
        ttl_seconds: Age after which an entry counts as stale.
        max_entries: Capacity; the least recently used entry is evicted beyond it.
        clock: Returns the current time in seconds (monotonic by default).
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry[V]] = OrderedDict()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def _is_fresh(self, entry: CacheEntry[V], now: float) -> bool:
        return now - entry.stored_at < self._ttl

    def get(self, key: Hashable, *, allow_stale: bool = False) -> V | None:
        """Return the cached value, or None when absent or stale.

        Args:
            key: Cache key.
            allow_stale: Also return entries older than the TTL.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not allow_stale and not self._is_fresh(entry, self._clock()):
            return None
        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: Hashable, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry {evicted!r}")

    def sweep(self) -> int:
        """Drop every stale entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
