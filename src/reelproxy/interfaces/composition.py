"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

import secrets
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from reelproxy.application.use_cases import ContentService, StreamMediaUseCase
from reelproxy.infrastructure.auth import SharedSecretLogin, StaticTokenVerifier
from reelproxy.infrastructure.cache import ResolutionCache
from reelproxy.infrastructure.resolvers import create_resolver
from reelproxy.infrastructure.storage import open_content_store
from reelproxy.infrastructure.streaming import StreamProxy
from reelproxy.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (required by resolver and stream proxy)
        2. Resolution cache
        3. Resolver backend
        4. Stream proxy + stream use case
        5. Content store + content service
        6. Admin credentials
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Shared HTTP client (lookup API + media proxying)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Resolution cache (per process)
    state.resolution_cache = ResolutionCache(ttl_seconds=config.cache_ttl_seconds)
    log.info("resolution_cache_initialized", ttl_seconds=config.cache_ttl_seconds)

    # 3) Resolver backend
    state.resolver = create_resolver(
        config.resolver,
        http_client=state.http_client,
        timeout=config.http_timeout_seconds,
    )
    log.info("resolver_initialized", provider=state.resolver.name)

    # 4) Stream proxy + use case
    state.stream_proxy = StreamProxy(
        state.http_client,
        user_agent=config.http_user_agent,
        timeout=config.http_timeout_seconds,
    )
    state.stream_uc = StreamMediaUseCase(
        resolver=state.resolver,
        cache=state.resolution_cache,
        proxy=state.stream_proxy,
    )

    # 5) Content store
    state.content_store = await open_content_store(config.store)
    state.content_service = ContentService(state.content_store)
    log.info("content_store_initialized", backend=state.content_store.backend)

    # 6) Admin credentials
    token = config.auth.admin_token
    if not token:
        token = secrets.token_urlsafe(32)
        log.info("admin_token_generated")
    state.token_verifier = StaticTokenVerifier(token)
    state.login = SharedSecretLogin(config.auth.admin_password, token)
    if not state.login.enabled:
        log.warning("admin_password_missing", detail="admin login is disabled")

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.content_store.aclose()
        log.info("content_store_closed")

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
