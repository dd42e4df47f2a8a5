"""Admin login: exchanges the shared password for the bearer token."""

from __future__ import annotations

from typing import Any, cast

from fastapi import APIRouter, Request
from pydantic import BaseModel, TypeAdapter

from reelproxy.interfaces.api.dependencies import parse_body, read_json
from reelproxy.interfaces.app_state import AppState

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginIn(BaseModel):
    password: Any = None


_LOGIN_ADAPTER: TypeAdapter[LoginIn] = TypeAdapter(LoginIn)


@router.post("/login")
async def login(request: Request) -> dict[str, Any]:
    """Return ``{token, success}``; 401 on a wrong password or disabled login."""
    state = cast(AppState, request.app.state)
    body = parse_body(_LOGIN_ADAPTER, await read_json(request), "Password is required")
    token = state.login.login(body.password)
    return {"success": True, "token": token}
