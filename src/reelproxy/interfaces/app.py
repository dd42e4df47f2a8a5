"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any, cast

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from reelproxy import __version__
from reelproxy.domain.exceptions import PersistenceError, ReelproxyError
from reelproxy.infrastructure.config import AppConfig
from reelproxy.interfaces.app_state import AppState
from reelproxy.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


async def reelproxy_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a domain error as the ``{error, details?, message?}`` envelope."""
    err = cast(ReelproxyError, exc)
    if isinstance(err, PersistenceError):
        # Storage internals stay in the log.
        log.error(
            "persistence_error",
            path=request.url.path,
            error=err.error,
            cause=repr(err.__cause__),
        )
        return JSONResponse(status_code=err.status_code, content={"error": err.error})

    log.warning(
        "request_failed",
        path=request.url.path,
        status_code=err.status_code,
        error=err.error,
    )
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def health_payload(state: AppState) -> dict[str, Any]:
    """Resolver identity, cache size, cookie usage and content backend."""
    payload: dict[str, Any] = {
        "status": "ok",
        "provider": state.resolver.name,
        "cacheItems": len(state.resolution_cache),
    }
    uses_cookies = getattr(state.resolver, "uses_cookies", None)
    if uses_cookies is not None:
        payload["usingCookies"] = uses_cookies
    payload["database"] = state.content_service.backend
    return payload


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app - configuration ONLY, NO resource initialization.

    Resources (HTTP client, resolver, content store) are created in lifespan().
    """
    app = FastAPI(
        title="Reelproxy",
        description="Short-video reel proxy with playlist moderation",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Content-Length", "Accept-Ranges"],
    )

    app.add_exception_handler(ReelproxyError, reelproxy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    from reelproxy.interfaces.api.auth.router import router as auth_router
    from reelproxy.interfaces.api.content.router import router as content_router
    from reelproxy.interfaces.api.stream.router import router as stream_router

    app.include_router(stream_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(content_router, prefix="/api")

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        """Liveness probe with resolver and storage identity."""
        return health_payload(cast(AppState, request.app.state))

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
