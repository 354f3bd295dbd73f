"""Protocol for the persistence collaborator."""

from typing import Any, Protocol


class KeyValueStoreProtocol(Protocol):
    """Minimal async key-value store holding JSON-compatible values."""

    async def get(self, key: str) -> Any | None:
        """Get the value stored under a key.

        Args:
            key: Storage key.

        Returns:
            The stored value, or None if the key is absent.
        """
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one.

        Args:
            key: Storage key.
            value: JSON-compatible value.
        """
        ...
