"""Shared test fixtures for the reelproxy test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock

import pytest

from reelproxy.domain.entities import PlaylistItem, Submission
from reelproxy.infrastructure.cache import ResolutionCache

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def playlist_item() -> PlaylistItem:
    """Minimal valid PlaylistItem."""
    return PlaylistItem(
        id="item-1",
        title="Sunset timelapse",
        url="https://www.instagram.com/reel/C1abc/",
        tags=["nature"],
    )


@pytest.fixture()
def submission() -> Submission:
    """Pending submission with a fixed timestamp."""
    return Submission(
        id="sub-1",
        title="Cat jumps",
        url="https://www.instagram.com/reel/Cxyz/",
        tags=["cats", "funny"],
        submitted_at="2025-01-01T12:00:00Z",
    )


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeResolver:
    """MediaResolverPort returning a fixed URL and counting calls."""

    direct_url: str = "https://cdn.example.com/v/clip.mp4"
    name: str = "rapidapi"
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def resolve(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.direct_url


class InMemoryContentStore:
    """ContentStorePort keeping both lists in memory."""

    def __init__(
        self,
        playlist: list[PlaylistItem] | None = None,
        submissions: list[Submission] | None = None,
    ) -> None:
        self.playlist = list(playlist or [])
        self.submissions = list(submissions or [])
        self.closed = False

    @property
    def backend(self) -> str:
        return "memory"

    async def list_playlist(self) -> list[PlaylistItem]:
        return list(self.playlist)

    async def replace_playlist(self, items: list[PlaylistItem]) -> None:
        self.playlist = list(items)

    async def list_submissions(self) -> list[Submission]:
        return list(self.submissions)

    async def replace_submissions(self, submissions: list[Submission]) -> None:
        self.submissions = list(submissions)

    async def aclose(self) -> None:
        self.closed = True


class InMemoryKeyValueStore:
    """KeyValueStorePort backed by a dict."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.closed = False

    async def get(self, key: str) -> Any | None:
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    async def aclose(self) -> None:
        self.closed = True

    async def __aenter__(self) -> InMemoryKeyValueStore:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def resolution_cache(clock: FakeClock) -> ResolutionCache:
    """One-hour cache driven by the fake clock."""
    return ResolutionCache(ttl_seconds=3600, clock=clock)


@pytest.fixture()
def fake_resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture()
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture()
def mock_stream_proxy() -> AsyncMock:
    """Mock StreamProxyPort."""
    proxy = AsyncMock()
    proxy.open = AsyncMock()
    return proxy


@pytest.fixture()
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()
