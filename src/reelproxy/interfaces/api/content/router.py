"""Playlist and submission-queue endpoints."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Depends, Request

from reelproxy.interfaces.api.content.schemas import (
    APPROVE_ADAPTER,
    PLAYLIST_ADAPTER,
    SUBMISSION_ADAPTER,
)
from reelproxy.interfaces.api.dependencies import parse_body, read_json, require_admin
from reelproxy.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["content"])


@router.get("/playlists")
async def list_playlists(request: Request) -> list[dict[str, Any]]:
    """Public playlist, in stored order."""
    state = cast(AppState, request.app.state)
    items = await state.content_service.list_playlist()
    return [item.to_dict() for item in items]


@router.post("/playlists", dependencies=[Depends(require_admin)])
async def replace_playlists(request: Request) -> dict[str, Any]:
    """Replace the whole playlist with the posted array (admin only)."""
    state = cast(AppState, request.app.state)
    body = parse_body(
        PLAYLIST_ADAPTER,
        await read_json(request),
        "Playlist must be an array of {title, url, tags?} items",
    )
    count = await state.content_service.replace_playlist(
        [item.to_entity() for item in body]
    )
    return {"success": True, "count": count}


@router.post("/submissions")
async def create_submission(request: Request) -> dict[str, Any]:
    """Public submission endpoint; entries wait for admin approval."""
    state = cast(AppState, request.app.state)
    body = parse_body(
        SUBMISSION_ADAPTER, await read_json(request), "Invalid submission"
    )
    submission = await state.content_service.submit(body.title, body.url, body.tags)
    return {"success": True, "submission": submission.to_dict()}


@router.get("/submissions", dependencies=[Depends(require_admin)])
async def list_submissions(request: Request) -> list[dict[str, Any]]:
    state = cast(AppState, request.app.state)
    submissions = await state.content_service.list_submissions()
    return [s.to_dict() for s in submissions]


@router.post("/submissions/approve", dependencies=[Depends(require_admin)])
async def approve_submission(request: Request) -> dict[str, Any]:
    """Move a pending submission into the playlist."""
    state = cast(AppState, request.app.state)
    body = parse_body(APPROVE_ADAPTER, await read_json(request), "Missing submission id")
    item = await state.content_service.approve(body.id)
    return {"success": True, "item": item.to_dict()}


@router.delete("/submissions/{submission_id}", dependencies=[Depends(require_admin)])
async def delete_submission(submission_id: str, request: Request) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    await state.content_service.reject(submission_id)
    return {"success": True}
