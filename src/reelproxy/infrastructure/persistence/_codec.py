"""JSON (de)serialization shared by the content store backends."""

from __future__ import annotations

import json

from reelproxy.domain.entities.content import PlaylistItem, Submission


def dump_playlist(items: list[PlaylistItem]) -> str:
    return json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2)


def load_playlist(raw: str | None) -> list[PlaylistItem]:
    if not raw:
        return []
    return [PlaylistItem.from_dict(d) for d in json.loads(raw)]


def dump_submissions(submissions: list[Submission]) -> str:
    return json.dumps(
        [s.to_dict() for s in submissions], ensure_ascii=False, indent=2
    )


def load_submissions(raw: str | None) -> list[Submission]:
    if not raw:
        return []
    return [Submission.from_dict(d) for d in json.loads(raw)]
