"""In-memory resolution cache: normalized URL -> direct media URL with TTL."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from reelproxy.domain.entities.media import CacheEntry

log = structlog.get_logger(__name__)


class ResolutionCache:
    """Time-bounded mapping of normalized source URLs to direct media URLs.

    Expired entries are masked on lookup, never purged; the next successful
    resolution for the same key overwrites them. Every write is a single
    dict assignment, so no lock is needed under asyncio.

    Not shared between worker processes: each process holds its own copy.

    Args:
        ttl_seconds: How long a resolved URL is served from the cache.
        clock: Time source in seconds (monotonic by default, injectable in tests).
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self._ttl):
            log.debug("resolution_cache_expired", key=key)
            return None
        return entry.direct_url

    def put(self, key: str, direct_url: str) -> None:
        self._entries[key] = CacheEntry(
            key=key, direct_url=direct_url, resolved_at=self._clock()
        )

    def __len__(self) -> int:
        return len(self._entries)
