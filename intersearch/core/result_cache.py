"""
In-memory result cache: normalized query -> resolved outcome.

Bounded (least-recently-used eviction) and time-expiring (lazy expiry on lookup).
One instance is created at startup and handed to the resolver; tests build
their own. Nothing is persisted.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from cachetools import TTLCache

from intersearch.schemas.search import Outcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 500
DEFAULT_TTL_SECONDS = 300.0


def normalize_query(text: str | None) -> str:
    """Cache key for a query: surrounding whitespace trimmed, nothing else (case and punctuation kept)."""
    return (text or "").strip()


@dataclass(frozen=True)
class CacheEntry:
    key: str
    outcome: Outcome
    created_at: float  # epoch seconds


class ResultCache:
    """LRU + TTL store of resolution outcomes. Lookups and stores never block on I/O."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._entries: TTLCache = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def lookup(self, query: str) -> Outcome | None:
        """Return the stored outcome for a live entry, refreshing its recency; None if absent or expired."""
        key = normalize_query(query)
        with self._lock:
            entry: CacheEntry | None = self._entries.get(key)
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
        if entry is None:
            logger.debug("[result_cache:lookup] miss key=%r", key)
            return None
        logger.info("[result_cache:lookup] hit key=%r source=%s", key, entry.outcome.source)
        return entry.outcome

    def store(self, query: str, outcome: Outcome) -> None:
        """Insert or fully replace the entry for the query; evicts the least recently used entry when full."""
        key = normalize_query(query)
        entry = CacheEntry(key=key, outcome=outcome, created_at=time.time())
        with self._lock:
            self._entries[key] = entry
            size = len(self._entries)
        logger.info("[result_cache:store] key=%r source=%s size=%d", key, outcome.source, size)

    def clear(self) -> int:
        """Drop every entry and reset counters. Returns the number of entries removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("[result_cache:clear] removed=%d", removed)
        return removed

    def stats(self) -> dict:
        with self._lock:
            self._entries.expire()
            return {
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
