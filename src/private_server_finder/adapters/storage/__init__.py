"""Key-value storage adapters."""

from private_server_finder.adapters.storage.json_file_store import JsonFileStore
from private_server_finder.adapters.storage.memory_store import MemoryStore

__all__ = ["JsonFileStore", "MemoryStore"]
