from .json_file_store import JsonFileContentStore
from .kv_content_store import KeyValueContentStore

__all__ = ["JsonFileContentStore", "KeyValueContentStore"]
