"""In-memory key-value store."""

import copy
from typing import Any

from private_server_finder.domain.contracts.key_value_store import KeyValueStoreProtocol


class MemoryStore(KeyValueStoreProtocol):
    """Process-local store; values are copied in and out like a real store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        """Initialize with optional initial contents."""
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        """Get a copy of the value stored under a key."""
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        """Store a copy of a value."""
        self._data[key] = copy.deepcopy(value)
