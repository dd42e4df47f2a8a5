"""Port for the key-value backends underneath the document content store."""

from __future__ import annotations

from typing import Any, Protocol


class KeyValueStorePort(Protocol):
    """Async key-value store without expiry.

    Implementations:
      - DiskcacheStore (SQLite-based, no daemon)
      - RedisStore (Redis async client)

    Backend failures raise ``PersistenceError``. Each adapter supports
    async context-manager semantics::

        async with store:
            await store.set("key", value)
    """

    async def get(self, key: str) -> Any:
        """Retrieve value. None = not found."""
        ...

    async def set(self, key: str, value: Any) -> None: ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> KeyValueStorePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
