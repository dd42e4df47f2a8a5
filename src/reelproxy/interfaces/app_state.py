"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from reelproxy.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from reelproxy.application.use_cases import ContentService, StreamMediaUseCase
    from reelproxy.domain.ports import (
        ContentStorePort,
        MediaResolverPort,
        ResolutionCachePort,
        StreamProxyPort,
        TokenVerifierPort,
    )
    from reelproxy.infrastructure.auth import SharedSecretLogin


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    content_store: ContentStorePort

    # Domain Ports
    resolution_cache: ResolutionCachePort
    resolver: MediaResolverPort
    stream_proxy: StreamProxyPort
    token_verifier: TokenVerifierPort

    # Application Services
    stream_uc: StreamMediaUseCase
    content_service: ContentService

    # Admin login (password -> static bearer token)
    login: SharedSecretLogin
