from .content import PlaylistItem, Submission, new_id
from .media import CacheEntry, SourceRequest, UpstreamResponse

__all__ = [
    "CacheEntry",
    "PlaylistItem",
    "SourceRequest",
    "Submission",
    "UpstreamResponse",
    "new_id",
]
