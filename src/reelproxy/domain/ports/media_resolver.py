"""Port for resolving source page URLs to direct media URLs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MediaResolverPort(Protocol):
    """Resolves a normalized source page URL to a direct, playable media URL.

    Implementations raise ``ResolutionError`` when no usable direct URL
    can be determined (unrecognized upstream shape, missing tool, page link
    returned instead of media, ...).
    """

    @property
    def name(self) -> str:
        """Backend identity reported by the health endpoint."""
        ...

    async def resolve(self, url: str) -> str: ...
