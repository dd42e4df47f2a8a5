"""Byte-range aware media proxy.

Browsers cannot play most short-video CDN URLs directly: the CDN checks
``Referer``/``User-Agent`` and the page platform forbids cross-origin
embedding. The proxy fetches the direct media URL server-side with browser-like
headers, forwards the player's ``Range`` header verbatim and mirrors the
upstream status (200, 206, 416, 403, ...) so seeking works natively.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import structlog

from reelproxy.domain.entities.media import UpstreamResponse
from reelproxy.domain.exceptions import UpstreamProxyError

log = structlog.get_logger(__name__)

FORWARDED_HEADERS: tuple[str, ...] = (
    "content-type",
    "content-length",
    "content-range",
    "accept-ranges",
)
DEFAULT_CONTENT_TYPE = "video/mp4"


def build_upstream_headers(
    *,
    user_agent: str,
    referer: str | None = None,
    range_header: str | None = None,
) -> dict[str, str]:
    """Outbound headers for the direct media request."""
    headers = {
        "User-Agent": user_agent,
        # Keep bytes (and Content-Length) identical to what the CDN stores.
        "Accept-Encoding": "identity",
    }
    if referer:
        headers["Referer"] = referer
    if range_header:
        headers["Range"] = range_header
    return headers


def filter_headers(upstream: httpx.Headers) -> dict[str, str]:
    """Copy the allow-listed headers; everything else is dropped."""
    headers = {
        name: upstream[name] for name in FORWARDED_HEADERS if name in upstream
    }
    headers.setdefault("content-type", DEFAULT_CONTENT_TYPE)
    return headers


class StreamProxy:
    """Opens streamed GET requests against direct media URLs.

    Args:
        http_client: Shared async client.
        user_agent: Browser User-Agent presented to the CDN.
        timeout: Seconds to connect and between received chunks. There is no
            overall deadline for the piping phase.
        chunk_size: Re-chunk the body to this size; ``None`` forwards chunks
            as they arrive.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        user_agent: str,
        timeout: float = 15.0,
        chunk_size: int | None = None,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent
        self._timeout = timeout
        self._chunk_size = chunk_size

    async def open(
        self,
        direct_url: str,
        *,
        referer: str | None = None,
        range_header: str | None = None,
    ) -> UpstreamResponse:
        """Send the upstream request and return status, headers and body.

        Any upstream status is accepted and passed through. Raises
        ``UpstreamProxyError`` only when no response could be obtained.
        """
        headers = build_upstream_headers(
            user_agent=self._user_agent,
            referer=referer,
            range_header=range_header,
        )
        if range_header:
            log.debug("stream_range_requested", range=range_header)

        request = self._http.build_request(
            "GET",
            direct_url,
            headers=headers,
            timeout=httpx.Timeout(self._timeout),
        )
        try:
            resp = await self._http.send(request, stream=True, follow_redirects=True)
        except httpx.HTTPError as e:
            log.error(
                "stream_open_failed",
                direct_url=direct_url[:80],
                error=str(e) or type(e).__name__,
            )
            raise UpstreamProxyError(
                "Stream error", details=str(e) or type(e).__name__
            ) from e

        log.info(
            "stream_opened",
            status=resp.status_code,
            content_range=resp.headers.get("content-range"),
            content_length=resp.headers.get("content-length"),
        )
        return UpstreamResponse(
            status_code=resp.status_code,
            headers=filter_headers(resp.headers),
            body=self._iter_body(resp, direct_url),
        )

    async def _iter_body(
        self, resp: httpx.Response, direct_url: str
    ) -> AsyncIterator[bytes]:
        """Forward upstream bytes as received, without decoding.

        Content-Encoding is not undone so the body matches the forwarded
        ``content-length`` and ``content-range``.

        A transport error mid-stream ends the body; bytes already flushed to
        the client stay sent. The upstream response is closed on completion,
        error or client disconnect (cancellation).
        """
        sent = 0
        try:
            async for chunk in resp.aiter_raw(chunk_size=self._chunk_size):
                sent += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            log.error(
                "stream_pipe_error",
                direct_url=direct_url[:80],
                bytes_sent=sent,
                error=str(e) or type(e).__name__,
            )
        finally:
            await resp.aclose()
            log.debug("stream_closed", bytes_sent=sent)
