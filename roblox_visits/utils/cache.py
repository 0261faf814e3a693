# small memo cache with TTL and FIFO capacity eviction
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    key: str
    payload: V
    stored_at: float


class MemoCache(Generic[V]):
    """In-process key -> value store with a freshness window.

    A lookup hits only while the entry is younger than ``ttl`` seconds.
    Expired entries are not swept; they linger until overwritten or pushed
    out by capacity. When a write takes the size above ``max_entries``, the
    earliest inserted entry is evicted. Overwriting a key refreshes its value
    and age but keeps its original place in the queue.
    """

    def __init__(
        self,
        ttl: float = 300.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < self.ttl:
            return entry.payload
        return None

    def put(self, key: str, value: V) -> Optional[str]:
        """Store ``value`` under ``key``; return the evicted key, if any."""
        entry = CacheEntry(key=key, payload=value, stored_at=self._clock())
        with self._lock:
            # OrderedDict assignment to an existing key keeps its position
            self._entries[key] = entry
            if len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                return evicted
        return None

    def keys(self) -> list[str]:
        """Keys in eviction order, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
