"""Bounded in-memory cache of processed media and their uploaded URLs."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict

from .constants import OPTIMIZATION_CONFIG


@dataclass(frozen=True, slots=True)
class CachedMedia:
    """Processed payload together with the URL the Late API returned for it."""

    buffer: bytes
    url: str


@dataclass(slots=True)
class _CacheEntry:
    buffer: bytes
    url: str
    stored_at: float


class MediaCache:
    """TTL cache with insertion-order eviction.

    Entries are evicted by age of insertion, not by last access; reads never
    reorder the cache.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = OPTIMIZATION_CONFIG.media_cache_ttl,
        max_entries: int = OPTIMIZATION_CONFIG.media_cache_max_entries,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock or time.time
        self._entries: Dict[str, _CacheEntry] = {}

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, file_id: str) -> CachedMedia | None:
        """Return the cached media or ``None``; stale entries are dropped."""

        entry = self._entries.get(file_id)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl_seconds:
            del self._entries[file_id]
            return None
        return CachedMedia(buffer=entry.buffer, url=entry.url)

    def put(self, file_id: str, buffer: bytes, url: str) -> None:
        """Store ``buffer``/``url`` for ``file_id``, evicting the oldest entry if full."""

        if file_id in self._entries:
            # refreshed timestamp, so the entry becomes the newest
            del self._entries[file_id]
        elif len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[file_id] = _CacheEntry(
            buffer=bytes(buffer), url=url, stored_at=self._clock()
        )

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._entries


media_cache = MediaCache()

__all__ = ["CachedMedia", "MediaCache", "media_cache"]
