"""URL helpers: tracking-parameter normalization, page-link detection, origins."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Share/referral/session markers that never change which video a link points to.
TRACKING_PARAMS: frozenset[str] = frozenset(
    {
        "igsh",
        "igshid",
        "fbclid",
        "gclid",
        "si",
        "feature",
        "ref",
        "ref_src",
        "ref_url",
        "share_id",
        "mibextid",
        "_r",
        "_t",
        "is_from_webapp",
        "sender_device",
    }
)
_TRACKING_PREFIXES: tuple[str, ...] = ("utm_",)

# hostname suffix -> platform key
_PLATFORMS: dict[str, str] = {
    "instagram.com": "instagram",
    "youtube.com": "youtube",
    "youtu.be": "youtube",
    "tiktok.com": "tiktok",
}


def _is_tracking(name: str) -> bool:
    lowered = name.lower()
    return lowered in TRACKING_PARAMS or lowered.startswith(_TRACKING_PREFIXES)


def normalize(raw_url: str) -> str:
    """Strip tracking query parameters so equivalent links share one key.

    Non-tracking parameters (``v=`` on YouTube, ``t=`` timestamps, ...) are
    kept in their original order; the fragment is dropped. Input that does
    not parse as an absolute URL is truncated at the first ``?``.
    Never raises, and ``normalize(normalize(u)) == normalize(u)``.

    >>> normalize("https://www.instagram.com/reel/C1abc/?igsh=xyz&utm_source=ig")
    'https://www.instagram.com/reel/C1abc/'
    """
    url = (raw_url or "").strip()
    try:
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError("not an absolute URL")
        kept = [
            (k, v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
            if not _is_tracking(k)
        ]
        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path, urlencode(kept), "")
        )
    except ValueError:
        return url.split("?", 1)[0]


def hostname_of(url: str) -> str:
    """Lowercase hostname of *url*, ``""`` when it cannot be parsed."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def _host_matches(hostname: str, domain: str) -> bool:
    domain = domain.lower().lstrip(".")
    return hostname == domain or hostname.endswith("." + domain)


def looks_like_page_link(url: str, page_domains: Iterable[str]) -> bool:
    """True when *url* points at a source page rather than at media bytes.

    Any path on a source-page domain counts (``/reel/``, ``/reels/``,
    ``/p/``, ``/watch``, ...). Media CDNs such as ``cdninstagram.com`` or
    ``googlevideo.com`` are different hosts and never match.
    """
    domains = list(page_domains)
    hostname = hostname_of(url)
    if hostname:
        return any(_host_matches(hostname, d) for d in domains)
    lowered = url.lower()
    return any(f"{d.lower()}/" in lowered for d in domains)


def platform_of(url: str) -> str | None:
    """Known platform key ("instagram", "youtube", "tiktok") for *url*."""
    hostname = hostname_of(url)
    if not hostname:
        return None
    for domain, platform in _PLATFORMS.items():
        if _host_matches(hostname, domain):
            return platform
    return None


def origin_referer(url: str) -> str | None:
    """``<scheme>://<host>/`` of *url*, used as the outbound Referer."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}/"
