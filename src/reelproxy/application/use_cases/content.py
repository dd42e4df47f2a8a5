"""Use cases for the playlist and the submission queue."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from reelproxy.domain.entities.content import PlaylistItem, Submission, new_id
from reelproxy.domain.exceptions import ConflictError, NotFoundError, ValidationError
from reelproxy.domain.ports.content_store import ContentStorePort
from reelproxy.domain.urls import normalize

log = structlog.get_logger(__name__)


def _clean_tags(tags: Iterable[str] | None) -> list[str]:
    return [t.strip() for t in tags or [] if t and t.strip()]


class ContentService:
    """Playlist replacement, public submissions and admin moderation.

    Mutations are serialized by one lock so the duplicate check + insert and
    the approve move (playlist append + queue removal) are atomic within the
    process.
    """

    def __init__(self, store: ContentStorePort) -> None:
        self._store = store
        self._lock = asyncio.Lock()

    @property
    def backend(self) -> str:
        return self._store.backend

    async def list_playlist(self) -> list[PlaylistItem]:
        return await self._store.list_playlist()

    async def replace_playlist(self, items: list[PlaylistItem]) -> int:
        """Replace the whole playlist; returns the new item count."""
        async with self._lock:
            await self._store.replace_playlist(items)
        log.info("playlist_replaced", count=len(items))
        return len(items)

    async def list_submissions(self) -> list[Submission]:
        return await self._store.list_submissions()

    async def submit(
        self, title: str | None, url: str | None, tags: Iterable[str] | None = None
    ) -> Submission:
        """Queue a public submission for review.

        Raises:
            ValidationError: Title or URL missing/blank.
            ConflictError: A pending submission already has the same URL
                (compared after tracking-parameter normalization).
        """
        title = (title or "").strip()
        url = (url or "").strip()
        if not title or not url:
            raise ValidationError("Title and url are required")

        async with self._lock:
            pending = await self._store.list_submissions()
            key = normalize(url)
            if any(normalize(s.url) == key for s in pending):
                log.info("submission_duplicate", url=url)
                raise ConflictError("This video has already been submitted")

            submission = Submission(
                id=new_id(), title=title, url=url, tags=_clean_tags(tags)
            )
            await self._store.replace_submissions([*pending, submission])

        log.info("submission_received", submission_id=submission.id, url=url)
        return submission

    async def approve(self, submission_id: str) -> PlaylistItem:
        """Move a pending submission into the playlist.

        Raises:
            NotFoundError: Unknown submission id (no state change).
        """
        async with self._lock:
            pending = await self._store.list_submissions()
            submission = next((s for s in pending if s.id == submission_id), None)
            if submission is None:
                raise NotFoundError(f"Submission not found: {submission_id}")

            item = submission.to_playlist_item()
            playlist = [i for i in await self._store.list_playlist() if i.id != item.id]
            # Playlist first: a failure in between leaves a duplicate, never a loss.
            await self._store.replace_playlist([*playlist, item])
            await self._store.replace_submissions(
                [s for s in pending if s.id != submission_id]
            )

        log.info("submission_approved", submission_id=submission_id)
        return item

    async def reject(self, submission_id: str) -> None:
        """Drop a pending submission.

        Raises:
            NotFoundError: Unknown submission id.
        """
        async with self._lock:
            pending = await self._store.list_submissions()
            remaining = [s for s in pending if s.id != submission_id]
            if len(remaining) == len(pending):
                raise NotFoundError(f"Submission not found: {submission_id}")
            await self._store.replace_submissions(remaining)

        log.info("submission_rejected", submission_id=submission_id)
