"""Port for playlist and submission persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reelproxy.domain.entities.content import PlaylistItem, Submission


@runtime_checkable
class ContentStorePort(Protocol):
    """Async interface over the persisted playlist and the pending queue.

    Implementations raise ``PersistenceError`` on backend failures.
    """

    @property
    def backend(self) -> str:
        """Backend identity reported by the health endpoint."""
        ...

    async def list_playlist(self) -> list[PlaylistItem]: ...

    async def replace_playlist(self, items: list[PlaylistItem]) -> None: ...

    async def list_submissions(self) -> list[Submission]: ...

    async def replace_submissions(self, submissions: list[Submission]) -> None: ...

    async def aclose(self) -> None: ...
