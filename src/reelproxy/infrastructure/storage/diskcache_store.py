"""Diskcache store - SQLite-based key-value persistence without daemon."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog
from diskcache import Cache as DiskCache

from reelproxy.domain.exceptions import PersistenceError

log = structlog.get_logger(__name__)


class DiskcacheStore:
    """Async wrapper for diskcache.Cache (sync-only library).

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Entries never expire; the store holds the playlist, not a cache.
    - Implements context manager (`async with`).

    Args:
        directory: SQLite DB directory.
        max_concurrent: Max parallel disk ops (SQLite lock contention).
    """

    def __init__(self, directory: str | Path = "./data", max_concurrent: int = 10) -> None:
        self.directory = Path(directory)
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    # --- Context Manager ---
    async def __aenter__(self) -> DiskcacheStore:
        if self._cache is None:
            try:
                self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            except OSError as e:
                log.error("diskcache_open_failed", path=str(self.directory), error=str(e))
                raise PersistenceError("Storage unavailable") from e
            log.info("diskcache_opened", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise RuntimeError(
                "Store not initialized. Use 'async with store:' or await store.__aenter__()"
            )
        return self._cache

    # --- KeyValueStorePort implementation ---
    async def get(self, key: str) -> Optional[Any]:
        cache = self._require_open()
        async with self._semaphore:
            try:
                return await asyncio.to_thread(cache.get, key, default=None)
            except Exception as e:
                log.error("diskcache_get_error", key=key, error=str(e))
                raise PersistenceError("Storage read failed") from e

    async def set(self, key: str, value: Any) -> None:
        cache = self._require_open()
        async with self._semaphore:
            try:
                await asyncio.to_thread(cache.set, key, value, expire=None)
            except Exception as e:
                log.error("diskcache_set_error", key=key, error=str(e))
                raise PersistenceError("Storage write failed") from e
            log.debug("store_set", key=key)
