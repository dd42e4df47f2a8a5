"""Domain entities for stream resolution and proxying.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceRequest:
    """A single inbound request to stream a video."""

    raw_url: str  # As given by the client (used for the Referer origin)
    normalized_url: str  # Tracking parameters removed (cache key + resolver input)
    range_header: str | None = None


@dataclass(frozen=True)
class CacheEntry:
    """A resolved direct media URL and the moment it was resolved."""

    key: str
    direct_url: str
    resolved_at: float  # Clock value of the owning cache (monotonic by default)

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.resolved_at < ttl


@dataclass
class UpstreamResponse:
    """Streamed response from a direct media URL.

    ``headers`` only ever contains allow-listed header names (lowercase).
    ``body`` is forward-only and must be consumed at most once.
    """

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: AsyncIterator[bytes] | None = None
