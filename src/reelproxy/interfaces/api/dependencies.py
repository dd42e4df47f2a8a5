"""Shared request dependencies: admin bearer auth and JSON body parsing."""

from __future__ import annotations

import json
from typing import Any, TypeVar, cast

import structlog
from fastapi import Request
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from reelproxy.domain.exceptions import AuthError, ForbiddenError, ValidationError
from reelproxy.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

T = TypeVar("T")


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_admin(request: Request) -> None:
    """Reject requests without a valid admin bearer token.

    Raises:
        AuthError: Header missing or not ``Bearer <token>`` (401).
        ForbiddenError: Token present but not accepted (403).
    """
    token = _bearer_token(request)
    if token is None:
        raise AuthError("Unauthorized")

    state = cast(AppState, request.app.state)
    if not state.token_verifier.verify(token):
        log.warning("admin_token_rejected", path=request.url.path)
        raise ForbiddenError("Forbidden")


async def read_json(request: Request) -> Any:
    """Decode the request body as JSON.

    Raises:
        ValidationError: Empty or malformed body.
    """
    raw = await request.body()
    if not raw:
        raise ValidationError("Request body is required")
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError("Invalid JSON body", details=str(e)) from e


def parse_body(adapter: TypeAdapter[T], data: Any, error: str) -> T:
    """Validate decoded JSON against *adapter*; 400 envelope on failure."""
    try:
        return adapter.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(
            error,
            details=[
                {"loc": list(err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ],
        ) from e
