"""Port for the per-process resolution cache."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResolutionCachePort(Protocol):
    """Maps normalized source URLs to resolved direct media URLs with a TTL."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, direct_url: str) -> None: ...

    def __len__(self) -> int: ...
