"""Key-value storage backends and the content store factory."""

from .diskcache_store import DiskcacheStore
from .redis_store import RedisStore
from .store_factory import open_content_store

__all__ = ["DiskcacheStore", "RedisStore", "open_content_store"]
