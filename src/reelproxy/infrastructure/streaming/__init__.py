from .stream_proxy import (
    DEFAULT_CONTENT_TYPE,
    FORWARDED_HEADERS,
    StreamProxy,
    build_upstream_headers,
    filter_headers,
)

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "FORWARDED_HEADERS",
    "StreamProxy",
    "build_upstream_headers",
    "filter_headers",
]
