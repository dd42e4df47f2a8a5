"""Tests for StreamMediaUseCase and request validation."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from reelproxy.application.use_cases.stream_media import (
    RESOLUTION_FAILED,
    StreamMediaUseCase,
    build_source_request,
    resolution_hint,
)
from reelproxy.domain.entities import UpstreamResponse
from reelproxy.domain.exceptions import ResolutionError, ValidationError
from reelproxy.infrastructure.cache import ResolutionCache

_PAGE = "https://www.instagram.com/reel/C1abc/?igsh=xyz&utm_source=ig_web"
_KEY = "https://www.instagram.com/reel/C1abc/"


def _use_case(
    resolver: Any, cache: ResolutionCache, proxy: AsyncMock
) -> StreamMediaUseCase:
    return StreamMediaUseCase(resolver=resolver, cache=cache, proxy=proxy)


class TestBuildSourceRequest:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_url_rejected(self, raw: str | None) -> None:
        with pytest.raises(ValidationError):
            build_source_request(raw, None)

    def test_normalizes_and_keeps_range(self) -> None:
        request = build_source_request(_PAGE, "bytes=0-")
        assert request.raw_url == _PAGE
        assert request.normalized_url == _KEY
        assert request.range_header == "bytes=0-"

    def test_empty_range_treated_as_absent(self) -> None:
        assert build_source_request(_PAGE, "").range_header is None


class TestResolutionHint:
    def test_instagram_with_lookup_api(self) -> None:
        hint = resolution_hint(_PAGE, "rapidapi")
        assert "Instagram" in hint
        assert "API key" in hint

    def test_youtube_with_extraction_tool(self) -> None:
        hint = resolution_hint("https://youtu.be/abc", "yt-dlp")
        assert "YouTube" in hint
        assert "yt-dlp" in hint

    def test_unknown_platform(self) -> None:
        assert "public video page" in resolution_hint("https://vimeo.com/1", "yt-dlp")


class TestResolve:
    async def test_miss_resolves_with_normalized_url_and_caches(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        direct = await uc.resolve(build_source_request(_PAGE, None))

        assert direct == fake_resolver.direct_url
        assert fake_resolver.calls == [_KEY]
        assert resolution_cache.get(_KEY) == fake_resolver.direct_url

    async def test_hit_skips_resolver(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        await uc.resolve(build_source_request(_PAGE, None))
        await uc.resolve(
            build_source_request("https://www.instagram.com/reel/C1abc/?igshid=other", None)
        )

        assert len(fake_resolver.calls) == 1

    async def test_expired_entry_resolves_again(
        self,
        fake_resolver: Any,
        resolution_cache: ResolutionCache,
        clock: Any,
        mock_stream_proxy: AsyncMock,
    ) -> None:
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        await uc.resolve(build_source_request(_PAGE, None))
        clock.advance(3600)
        await uc.resolve(build_source_request(_PAGE, None))

        assert len(fake_resolver.calls) == 2

    async def test_failure_wrapped_with_hint_and_not_cached(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        fake_resolver.error = ResolutionError(
            "lookup service returned HTTP 429", details={"message": "Too many requests"}
        )
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        with pytest.raises(ResolutionError) as exc_info:
            await uc.resolve(build_source_request(_PAGE, None))

        err = exc_info.value
        assert err.error == RESOLUTION_FAILED
        assert err.details == {
            "reason": "lookup service returned HTTP 429",
            "response": {"message": "Too many requests"},
        }
        assert err.message is not None and "Instagram" in err.message
        assert len(resolution_cache) == 0

    async def test_string_details_joined(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        fake_resolver.error = ResolutionError("extraction failed (exit code 1)", details="ERROR: private")
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        with pytest.raises(ResolutionError) as exc_info:
            await uc.resolve(build_source_request(_PAGE, None))

        assert exc_info.value.details == "extraction failed (exit code 1): ERROR: private"


class TestExecute:
    async def test_opens_stream_with_origin_referer_and_range(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        upstream = UpstreamResponse(status_code=206, headers={"content-type": "video/mp4"})
        mock_stream_proxy.open.return_value = upstream
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        result = await uc.execute(build_source_request(_PAGE, "bytes=100-"))

        assert result is upstream
        mock_stream_proxy.open.assert_awaited_once_with(
            fake_resolver.direct_url,
            referer="https://www.instagram.com/",
            range_header="bytes=100-",
        )

    async def test_resolution_failure_skips_proxy(
        self, fake_resolver: Any, resolution_cache: ResolutionCache, mock_stream_proxy: AsyncMock
    ) -> None:
        fake_resolver.error = ResolutionError("boom")
        uc = _use_case(fake_resolver, resolution_cache, mock_stream_proxy)

        with pytest.raises(ResolutionError):
            await uc.execute(build_source_request(_PAGE, None))

        mock_stream_proxy.open.assert_not_awaited()
