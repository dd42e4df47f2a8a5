"""Domain entities for the playlist and the submission queue."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def new_id() -> str:
    """Generate a unique identifier for playlist items and submissions."""
    return uuid.uuid4().hex


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class PlaylistItem:
    """A video entry shown in the public playlist."""

    id: str
    title: str
    url: str
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlaylistItem:
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            url=str(data["url"]),
            tags=[str(t) for t in data.get("tags") or []],
        )


@dataclass(frozen=True)
class Submission:
    """A publicly submitted video waiting for admin approval."""

    id: str
    title: str
    url: str
    tags: list[str] = field(default_factory=list)
    submitted_at: str = field(default_factory=_utc_now_iso)

    def to_playlist_item(self) -> PlaylistItem:
        """Approved submissions keep their id, title, url and tags."""
        return PlaylistItem(
            id=self.id, title=self.title, url=self.url, tags=list(self.tags)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "tags": list(self.tags),
            "submittedAt": self.submitted_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Submission:
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            url=str(data["url"]),
            tags=[str(t) for t in data.get("tags") or []],
            submitted_at=str(data.get("submittedAt") or _utc_now_iso()),
        )
