"""Content store backed by two JSON files in one directory.

Layout::

    <directory>/playlists.json    [{"id", "title", "url", "tags"}, ...]
    <directory>/submissions.json  [{"id", "title", "url", "tags", "submittedAt"}, ...]

Writes go to a temporary sibling file first and are moved into place with
``os.replace`` so a crash never leaves a half-written file behind.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import structlog

from reelproxy.domain.entities.content import PlaylistItem, Submission
from reelproxy.domain.exceptions import PersistenceError

from ._codec import dump_playlist, dump_submissions, load_playlist, load_submissions

log = structlog.get_logger(__name__)

PLAYLIST_FILE = "playlists.json"
SUBMISSIONS_FILE = "submissions.json"


def _read_text(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def _write_text_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


class JsonFileContentStore:
    """File-based ContentStorePort implementation."""

    def __init__(self, directory: str | Path = "./data") -> None:
        self.directory = Path(directory)

    @property
    def backend(self) -> str:
        return "file"

    async def _read(self, name: str) -> str | None:
        path = self.directory / name
        try:
            return await asyncio.to_thread(_read_text, path)
        except OSError as e:
            log.error("content_file_read_failed", path=str(path), error=str(e))
            raise PersistenceError("Storage read failed") from e

    async def _write(self, name: str, content: str) -> None:
        path = self.directory / name
        try:
            await asyncio.to_thread(_write_text_atomic, path, content)
        except OSError as e:
            log.error("content_file_write_failed", path=str(path), error=str(e))
            raise PersistenceError("Storage write failed") from e
        log.debug("content_file_written", path=str(path), size_bytes=len(content))

    async def list_playlist(self) -> list[PlaylistItem]:
        raw = await self._read(PLAYLIST_FILE)
        try:
            return load_playlist(raw)
        except (ValueError, KeyError, TypeError) as e:
            log.error("content_file_corrupt", file=PLAYLIST_FILE, error=str(e))
            raise PersistenceError("Storage read failed") from e

    async def replace_playlist(self, items: list[PlaylistItem]) -> None:
        await self._write(PLAYLIST_FILE, dump_playlist(items))

    async def list_submissions(self) -> list[Submission]:
        raw = await self._read(SUBMISSIONS_FILE)
        try:
            return load_submissions(raw)
        except (ValueError, KeyError, TypeError) as e:
            log.error("content_file_corrupt", file=SUBMISSIONS_FILE, error=str(e))
            raise PersistenceError("Storage read failed") from e

    async def replace_submissions(self, submissions: list[Submission]) -> None:
        await self._write(SUBMISSIONS_FILE, dump_submissions(submissions))

    async def aclose(self) -> None:
        return None
