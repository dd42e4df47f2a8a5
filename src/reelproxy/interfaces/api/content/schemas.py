"""Request bodies for the playlist and submission endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter

from reelproxy.domain.entities.content import PlaylistItem, new_id


class PlaylistItemIn(BaseModel):
    id: str | None = None
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)

    def to_entity(self) -> PlaylistItem:
        return PlaylistItem(
            id=self.id or new_id(),
            title=self.title,
            url=self.url,
            tags=list(self.tags),
        )


class SubmissionIn(BaseModel):
    # Presence is checked by ContentService.submit so the message is uniform.
    title: str | None = None
    url: str | None = None
    tags: list[str] = Field(default_factory=list)


class ApproveIn(BaseModel):
    id: str = Field(min_length=1)


PLAYLIST_ADAPTER: TypeAdapter[list[PlaylistItemIn]] = TypeAdapter(list[PlaylistItemIn])
SUBMISSION_ADAPTER: TypeAdapter[SubmissionIn] = TypeAdapter(SubmissionIn)
APPROVE_ADAPTER: TypeAdapter[ApproveIn] = TypeAdapter(ApproveIn)
