"""Use case: stream the media behind a source page URL.

received -> normalized -> cache hit | cache miss -> resolving -> proxying
"""

from __future__ import annotations

from typing import Any

import structlog

from reelproxy.domain.entities.media import SourceRequest, UpstreamResponse
from reelproxy.domain.exceptions import ResolutionError, ValidationError
from reelproxy.domain.ports.media_resolver import MediaResolverPort
from reelproxy.domain.ports.resolution_cache import ResolutionCachePort
from reelproxy.domain.ports.stream_proxy import StreamProxyPort
from reelproxy.domain.urls import normalize, origin_referer, platform_of

log = structlog.get_logger(__name__)

RESOLUTION_FAILED = "Could not retrieve the video"

_PLATFORM_HINTS: dict[str, str] = {
    "instagram": (
        "Instagram refused or hid this reel; it may be private, deleted "
        "or region-locked."
    ),
    "youtube": (
        "YouTube did not expose a playable stream; age-restricted, private "
        "or members-only videos cannot be proxied."
    ),
    "tiktok": "TikTok did not expose a playable stream for this video.",
}
_GENERIC_HINT = "Make sure the link points to a public video page."


def resolution_hint(raw_url: str, provider: str) -> str:
    """User-facing hint combining platform and resolver-backend guidance."""
    platform = platform_of(raw_url)
    hint = _PLATFORM_HINTS.get(platform or "", _GENERIC_HINT)
    if provider == "rapidapi":
        return f"{hint} Check your lookup API key and remaining credits."
    return f"{hint} Make sure {provider} is installed and up to date."


def _detail_of(error: ResolutionError) -> Any:
    if error.details is None:
        return error.error
    if isinstance(error.details, str):
        return f"{error.error}: {error.details}"
    return {"reason": error.error, "response": error.details}


def build_source_request(raw_url: str | None, range_header: str | None) -> SourceRequest:
    """Validate the ``url`` query value and normalize it.

    Raises:
        ValidationError: If the URL is missing or blank.
    """
    if raw_url is None or not raw_url.strip():
        raise ValidationError("Missing url query parameter")
    return SourceRequest(
        raw_url=raw_url.strip(),
        normalized_url=normalize(raw_url),
        range_header=range_header or None,
    )


class StreamMediaUseCase:
    """Ties normalizer, resolution cache, resolver and stream proxy together."""

    def __init__(
        self,
        *,
        resolver: MediaResolverPort,
        cache: ResolutionCachePort,
        proxy: StreamProxyPort,
    ) -> None:
        self._resolver = resolver
        self._cache = cache
        self._proxy = proxy

    async def resolve(self, request: SourceRequest) -> str:
        """Direct media URL for *request*, from the cache or the resolver.

        Raises:
            ResolutionError: With a platform-aware ``message`` attached.
        """
        key = request.normalized_url
        cached = self._cache.get(key)
        if cached is not None:
            log.info("resolution_cache_hit", url=key)
            return cached

        log.info("resolution_cache_miss", url=key, provider=self._resolver.name)
        try:
            direct_url = await self._resolver.resolve(key)
        except ResolutionError as e:
            log.error(
                "resolution_failed",
                url=key,
                provider=self._resolver.name,
                error=e.error,
                details=e.details,
            )
            raise ResolutionError(
                RESOLUTION_FAILED,
                details=_detail_of(e),
                message=resolution_hint(request.raw_url, self._resolver.name),
            ) from e

        self._cache.put(key, direct_url)
        log.info("resolution_cached", url=key, direct_url=direct_url[:80])
        return direct_url

    async def execute(self, request: SourceRequest) -> UpstreamResponse:
        """Resolve and open the upstream media stream.

        Raises:
            ResolutionError: No usable direct URL.
            UpstreamProxyError: The media request could not be established.
        """
        direct_url = await self.resolve(request)
        return await self._proxy.open(
            direct_url,
            referer=origin_referer(request.raw_url),
            range_header=request.range_header,
        )
