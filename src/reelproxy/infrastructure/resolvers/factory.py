"""Resolver factory - builds the configured resolver backend."""

from __future__ import annotations

import httpx
import structlog

from reelproxy.domain.ports.media_resolver import MediaResolverPort
from reelproxy.infrastructure.config.schema import ResolverConfig
from reelproxy.infrastructure.resolvers.extraction_tool import ExtractionToolResolver
from reelproxy.infrastructure.resolvers.lookup_api import LookupApiResolver

log = structlog.get_logger(__name__)


def create_resolver(
    config: ResolverConfig,
    *,
    http_client: httpx.AsyncClient,
    timeout: float = 15.0,
) -> MediaResolverPort:
    """Create the resolver selected by ``config.backend``.

    Raises:
        ValueError: If the backend is unknown.
    """
    if config.backend == "lookup_api":
        if not config.lookup_api_key:
            log.warning("lookup_api_key_missing", api_url=config.lookup_api_url)
        log.info("resolver_factory_create", backend=config.backend)
        return LookupApiResolver(
            http_client,
            api_url=config.lookup_api_url,
            api_key=config.lookup_api_key,
            api_host=config.lookup_api_host,
            page_domains=config.page_link_domains,
            timeout=timeout,
        )
    if config.backend == "extraction_tool":
        log.info(
            "resolver_factory_create",
            backend=config.backend,
            binary=config.extraction_binary,
            cookies_file=str(config.cookies_file),
        )
        return ExtractionToolResolver(
            binary=config.extraction_binary,
            format_selector=config.extraction_format,
            cookies_file=config.cookies_file,
            timeout=config.extraction_timeout_seconds,
        )
    raise ValueError(
        f"Unknown resolver backend: {config.backend!r}. "
        "Must be 'lookup_api' or 'extraction_tool'."
    )
