from .content_store import ContentStorePort
from .key_value_store import KeyValueStorePort
from .media_resolver import MediaResolverPort
from .resolution_cache import ResolutionCachePort
from .stream_proxy import StreamProxyPort
from .token_verifier import TokenVerifierPort

__all__ = [
    "ContentStorePort",
    "KeyValueStorePort",
    "MediaResolverPort",
    "ResolutionCachePort",
    "StreamProxyPort",
    "TokenVerifierPort",
]
