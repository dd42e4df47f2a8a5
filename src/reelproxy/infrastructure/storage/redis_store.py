"""Redis store - async key-value persistence via redis.asyncio."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from reelproxy.domain.exceptions import PersistenceError

log = structlog.get_logger(__name__)


class RedisStore:
    """Async Redis key-value store.

    - Uses `redis.asyncio.Redis` (async-native, no to_thread needed).
    - Semaphore limits parallel Redis ops (prevents connection exhaustion).
    - Values are stored as UTF-8 strings without expiry.

    Args:
        url: Redis URL (e.g. `redis://localhost:6379/0`).
        max_concurrent: Max parallel Redis ops.
    """

    def __init__(self, url: str = "redis://localhost:6379/0", max_concurrent: int = 50) -> None:
        self.url = url
        self._client: Redis | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    # --- Context Manager ---
    async def __aenter__(self) -> RedisStore:
        if self._client is None:
            self._client = Redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
            )
            try:
                await self._client.ping()
                log.info("redis_connected", host=self.url.rsplit("@", 1)[-1])
            except RedisError as e:
                log.error(
                    "redis_connection_failed",
                    host=self.url.rsplit("@", 1)[-1],
                    error=str(e),
                )
                raise PersistenceError("Storage unavailable") from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.info("redis_closed")

    def _require_open(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Use 'async with store:'")
        return self._client

    # --- KeyValueStorePort implementation ---
    async def get(self, key: str) -> Any | None:
        client = self._require_open()
        async with self._semaphore:
            try:
                return await client.get(key)
            except RedisError as e:
                log.error("redis_get_error", key=key, error=str(e))
                raise PersistenceError("Storage read failed") from e

    async def set(self, key: str, value: Any) -> None:
        client = self._require_open()
        async with self._semaphore:
            try:
                await client.set(key, value)
            except RedisError as e:
                log.error("redis_set_error", key=key, error=str(e))
                raise PersistenceError("Storage write failed") from e
            log.debug("store_set", key=key)
