"""Tests for the Range-aware stream proxy."""

from __future__ import annotations

import gzip

import httpx
import pytest
import respx

from reelproxy.domain.exceptions import UpstreamProxyError
from reelproxy.infrastructure.streaming import (
    StreamProxy,
    build_upstream_headers,
    filter_headers,
)

_MEDIA = "https://scontent.cdninstagram.com/v/clip.mp4"
_UA = "TestAgent/1.0"


class _DroppingStream(httpx.AsyncByteStream):
    """Upstream body that fails after the first chunk."""

    def __init__(self) -> None:
        self.closed = False

    async def __aiter__(self):
        yield b"abcd"
        raise httpx.ReadError("connection reset by peer")

    async def aclose(self) -> None:
        self.closed = True


async def _drain(proxy_body) -> bytes:
    return b"".join([chunk async for chunk in proxy_body])


class TestBuildUpstreamHeaders:
    def test_minimal(self) -> None:
        assert build_upstream_headers(user_agent=_UA) == {
            "User-Agent": _UA,
            "Accept-Encoding": "identity",
        }

    def test_referer_and_range(self) -> None:
        headers = build_upstream_headers(
            user_agent=_UA,
            referer="https://www.instagram.com/",
            range_header="bytes=100-",
        )
        assert headers["Referer"] == "https://www.instagram.com/"
        assert headers["Range"] == "bytes=100-"


class TestFilterHeaders:
    def test_only_allow_listed_headers_kept(self) -> None:
        upstream = httpx.Headers(
            {
                "Content-Type": "video/mp4",
                "Content-Length": "1000",
                "Content-Range": "bytes 0-999/5000",
                "Accept-Ranges": "bytes",
                "Set-Cookie": "session=abc",
                "Cache-Control": "max-age=3600",
                "X-FB-Debug": "xyz",
                "Access-Control-Allow-Origin": "https://www.instagram.com",
            }
        )
        assert filter_headers(upstream) == {
            "content-type": "video/mp4",
            "content-length": "1000",
            "content-range": "bytes 0-999/5000",
            "accept-ranges": "bytes",
        }

    def test_default_content_type(self) -> None:
        assert filter_headers(httpx.Headers({"Content-Length": "5"})) == {
            "content-length": "5",
            "content-type": "video/mp4",
        }


class TestStreamProxy:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_range_passthrough(self) -> None:
        route = respx.get(_MEDIA).respond(
            206,
            headers={
                "Content-Type": "video/mp4",
                "Content-Length": "4",
                "Content-Range": "bytes 100-103/5000",
                "Accept-Ranges": "bytes",
                "Set-Cookie": "a=b",
            },
            content=b"\x00\x01\x02\x03",
        )

        async with httpx.AsyncClient() as client:
            proxy = StreamProxy(client, user_agent=_UA, timeout=5.0, chunk_size=2)
            upstream = await proxy.open(
                _MEDIA,
                referer="https://www.instagram.com/",
                range_header="bytes=100-103",
            )
            body = await _drain(upstream.body)

        assert upstream.status_code == 206
        assert upstream.headers["content-range"] == "bytes 100-103/5000"
        assert upstream.headers["accept-ranges"] == "bytes"
        assert "set-cookie" not in upstream.headers
        assert body == b"\x00\x01\x02\x03"

        sent = route.calls.last.request
        assert sent.headers["Range"] == "bytes=100-103"
        assert sent.headers["Referer"] == "https://www.instagram.com/"
        assert sent.headers["User-Agent"] == _UA
        assert sent.headers["Accept-Encoding"] == "identity"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_range_header_when_absent(self) -> None:
        route = respx.get(_MEDIA).respond(200, content=b"data")

        async with httpx.AsyncClient() as client:
            upstream = await StreamProxy(client, user_agent=_UA).open(_MEDIA)
            await _drain(upstream.body)

        assert upstream.status_code == 200
        assert "Range" not in route.calls.last.request.headers
        assert upstream.headers["content-type"] == "video/mp4"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_error_status_mirrored(self) -> None:
        respx.get(_MEDIA).respond(403, content=b"URL signature expired")

        async with httpx.AsyncClient() as client:
            upstream = await StreamProxy(client, user_agent=_UA).open(_MEDIA)
            body = await _drain(upstream.body)

        assert upstream.status_code == 403
        assert body == b"URL signature expired"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_unsatisfiable_range_mirrored(self) -> None:
        respx.get(_MEDIA).respond(416, headers={"Content-Range": "bytes */5000"})

        async with httpx.AsyncClient() as client:
            upstream = await StreamProxy(client, user_agent=_UA).open(
                _MEDIA, range_header="bytes=9999-"
            )
            await _drain(upstream.body)

        assert upstream.status_code == 416
        assert upstream.headers["content-range"] == "bytes */5000"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_connect_failure_raises(self) -> None:
        respx.get(_MEDIA).mock(side_effect=httpx.ConnectTimeout("timed out"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamProxyError) as exc_info:
                await StreamProxy(client, user_agent=_UA).open(_MEDIA)

        assert exc_info.value.error == "Stream error"
        assert exc_info.value.status_code == 500

    @respx.mock
    @pytest.mark.asyncio()
    async def test_encoded_body_passed_through_undecoded(self) -> None:
        compressed = gzip.compress(b"\x00" * 5000)
        respx.get(_MEDIA).respond(
            200,
            headers={
                "Content-Type": "video/mp4",
                "Content-Encoding": "gzip",
                "Content-Length": str(len(compressed)),
            },
            content=compressed,
        )

        async with httpx.AsyncClient() as client:
            upstream = await StreamProxy(client, user_agent=_UA).open(_MEDIA)
            body = await _drain(upstream.body)

        assert body == compressed
        assert int(upstream.headers["content-length"]) == len(body)
        assert "content-encoding" not in upstream.headers

    @pytest.mark.asyncio()
    async def test_mid_stream_error_ends_body_and_closes_upstream(self) -> None:
        stream = _DroppingStream()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"Content-Type": "video/mp4"}, stream=stream
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            upstream = await StreamProxy(client, user_agent=_UA).open(_MEDIA)
            body = await _drain(upstream.body)

        assert upstream.status_code == 200
        assert body == b"abcd"
        assert stream.closed is True
