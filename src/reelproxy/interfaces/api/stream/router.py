"""Streaming endpoint: resolves a source page URL and pipes the media bytes."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Header, Query, Request
from fastapi.responses import StreamingResponse

from reelproxy.application.use_cases import build_source_request
from reelproxy.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stream"])


@router.get("/stream")
async def stream_media(
    request: Request,
    url: str | None = Query(default=None, description="Source page URL."),
    range_header: str | None = Header(default=None, alias="range"),
) -> StreamingResponse:
    """Proxy the media behind ``url``.

    The upstream status (200, 206, 416, ...) and the allow-listed headers are
    mirrored so browsers can seek with Range requests.

    Raises:
        ValidationError: ``url`` missing (400, no outbound call made).
        ResolutionError: No direct media URL could be obtained (500).
        UpstreamProxyError: The media request failed before any byte (500).
    """
    state = cast(AppState, request.app.state)
    source = build_source_request(url, range_header)
    log.info("stream_request", url=source.normalized_url, range=source.range_header)

    upstream = await state.stream_uc.execute(source)
    return StreamingResponse(
        upstream.body if upstream.body is not None else iter(()),
        status_code=upstream.status_code,
        headers=upstream.headers,
    )
