"""Port for opening upstream media streams."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reelproxy.domain.entities.media import UpstreamResponse


@runtime_checkable
class StreamProxyPort(Protocol):
    """Opens a streamed GET against a direct media URL.

    Implementations mirror any upstream status and raise
    ``UpstreamProxyError`` only when no response could be obtained.
    """

    async def open(
        self,
        direct_url: str,
        *,
        referer: str | None = None,
        range_header: str | None = None,
    ) -> UpstreamResponse: ...
