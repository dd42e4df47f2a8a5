"""Lookup-API resolver: asks a third-party downloader API for the media URL.

The API (RapidAPI-style, keyed by ``X-RapidAPI-Key``/``X-RapidAPI-Host``)
answers with heterogeneous shapes across plans and versions::

    {"data": {"medias": [{"type": "video", "url": "https://...mp4"}]}}
    {"medias": [...], "download_url": "..."}
    {"url": "..."}

and sometimes degrades to echoing the original page link instead of a media
link. ``extract_media_url`` walks the shapes in a fixed order and rejects any
candidate that still points at a source page.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import urlsplit

import httpx
import structlog

from reelproxy.domain.exceptions import ResolutionError
from reelproxy.domain.urls import looks_like_page_link

log = structlog.get_logger(__name__)

PAGE_LINK_ERROR = (
    "direct media link not found; "
    "lookup service returned a page link instead of media"
)

_FALLBACK_FIELDS: tuple[str, ...] = ("download_url", "url")


def _non_empty_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value.strip() else None


def _pick_media_candidate(medias: list[Any]) -> str | None:
    """First entry typed "video", else the first entry; its ``url``."""
    entry = next(
        (m for m in medias if isinstance(m, dict) and m.get("type") == "video"),
        medias[0],
    )
    if not isinstance(entry, dict):
        return None
    return _non_empty_str(entry.get("url"))


def extract_media_url(body: Any, page_domains: Iterable[str]) -> str | None:
    """Return the direct media URL in a lookup response, or None.

    1. Use ``body["data"]`` when it is an object, else the body itself.
    2. Take the preferred entry of a non-empty ``medias`` list.
    3. If that yields nothing or a page link, fall back to ``download_url``
       then ``url``, each only when it is not a page link itself.
    4. Anything still missing or still a page link is rejected.
    """
    domains = list(page_domains)
    if not isinstance(body, dict):
        return None

    data = body.get("data")
    payload = data if isinstance(data, dict) else body

    candidate: str | None = None
    medias = payload.get("medias")
    if isinstance(medias, list) and medias:
        candidate = _pick_media_candidate(medias)

    if candidate is None or looks_like_page_link(candidate, domains):
        for field_name in _FALLBACK_FIELDS:
            value = _non_empty_str(payload.get(field_name))
            if value is not None and not looks_like_page_link(value, domains):
                candidate = value
                break

    if candidate is None or looks_like_page_link(candidate, domains):
        return None
    return candidate


def _response_details(resp: httpx.Response) -> Any:
    """Upstream error body for diagnostics (JSON when possible, else text)."""
    try:
        return resp.json()
    except ValueError:
        return resp.text[:1000]


class LookupApiResolver:
    """Resolves source page URLs through a third-party lookup API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_url: str,
        api_key: str | None,
        api_host: str | None = None,
        page_domains: Iterable[str] = (),
        timeout: float = 15.0,
    ) -> None:
        self._http = http_client
        self._api_url = api_url
        self._api_key = api_key
        self._api_host = api_host or (urlsplit(api_url).hostname or "")
        self._page_domains = list(page_domains)
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "rapidapi"

    def _headers(self) -> dict[str, str]:
        headers = {"X-RapidAPI-Host": self._api_host}
        if self._api_key:
            headers["X-RapidAPI-Key"] = self._api_key
        return headers

    async def resolve(self, url: str) -> str:
        log.info("lookup_api_resolving", url=url)
        try:
            resp = await self._http.get(
                self._api_url,
                params={"url": url},
                headers=self._headers(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            log.error("lookup_api_request_failed", url=url, error=str(e))
            raise ResolutionError(
                "lookup request failed", details=str(e) or type(e).__name__
            ) from e

        if resp.status_code >= 400:
            details = _response_details(resp)
            log.error(
                "lookup_api_error",
                url=url,
                status=resp.status_code,
                body=details,
            )
            raise ResolutionError(
                f"lookup service returned HTTP {resp.status_code}",
                details=details,
            )

        try:
            body = resp.json()
        except ValueError as e:
            log.error("lookup_api_invalid_json", url=url, body=resp.text[:1000])
            raise ResolutionError(
                "lookup service returned invalid JSON", details=resp.text[:500]
            ) from e

        direct_url = extract_media_url(body, self._page_domains)
        if direct_url is None:
            log.error("lookup_api_unrecognized_response", url=url, body=body)
            raise ResolutionError(PAGE_LINK_ERROR)

        log.info("lookup_api_resolved", url=url, direct_url=direct_url[:80])
        return direct_url
