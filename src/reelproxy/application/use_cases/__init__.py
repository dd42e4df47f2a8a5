from .content import ContentService
from .stream_media import StreamMediaUseCase, build_source_request, resolution_hint

__all__ = [
    "ContentService",
    "StreamMediaUseCase",
    "build_source_request",
    "resolution_hint",
]
