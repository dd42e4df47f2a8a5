"""Content store backed by a KeyValueStorePort (diskcache/redis).

The playlist and the pending queue are each stored as one JSON document
under ``<prefix>:playlist`` and ``<prefix>:submissions``.
"""

from __future__ import annotations

import structlog

from reelproxy.domain.entities.content import PlaylistItem, Submission
from reelproxy.domain.exceptions import PersistenceError
from reelproxy.domain.ports.key_value_store import KeyValueStorePort

from ._codec import dump_playlist, dump_submissions, load_playlist, load_submissions

log = structlog.get_logger(__name__)


class KeyValueContentStore:
    """Stores playlist and submissions as JSON documents in a key-value store."""

    def __init__(
        self, store: KeyValueStorePort, *, backend: str, key_prefix: str = "reelproxy"
    ) -> None:
        self.store = store
        self._backend = backend
        self._playlist_key = f"{key_prefix}:playlist"
        self._submissions_key = f"{key_prefix}:submissions"

    @property
    def backend(self) -> str:
        return self._backend

    async def list_playlist(self) -> list[PlaylistItem]:
        raw = await self.store.get(self._playlist_key)
        try:
            return load_playlist(raw)
        except (ValueError, KeyError, TypeError) as e:
            log.error("content_document_corrupt", key=self._playlist_key, error=str(e))
            raise PersistenceError("Storage read failed") from e

    async def replace_playlist(self, items: list[PlaylistItem]) -> None:
        await self.store.set(self._playlist_key, dump_playlist(items))
        log.debug("playlist_saved", backend=self._backend, count=len(items))

    async def list_submissions(self) -> list[Submission]:
        raw = await self.store.get(self._submissions_key)
        try:
            return load_submissions(raw)
        except (ValueError, KeyError, TypeError) as e:
            log.error(
                "content_document_corrupt", key=self._submissions_key, error=str(e)
            )
            raise PersistenceError("Storage read failed") from e

    async def replace_submissions(self, submissions: list[Submission]) -> None:
        await self.store.set(self._submissions_key, dump_submissions(submissions))
        log.debug("submissions_saved", backend=self._backend, count=len(submissions))

    async def aclose(self) -> None:
        await self.store.aclose()
