"""Key-value store persisted as a single JSON file."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from private_server_finder.domain.contracts.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStoreProtocol):
    """Stores all keys in one JSON object on disk.

    The whole file is rewritten on every ``set`` through a temporary file,
    so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file location; created on first write.
        """
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store {self.path} does not contain a JSON object, ignoring it")
            return {}
        return data

    def _write(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Any | None:
        """Get the value stored under a key."""
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        """Store a value and rewrite the file.

        Writes are serialized so concurrent calls never drop each other's keys.
        """
        async with self._write_lock:
            await asyncio.to_thread(self._write, key, value)
        logger.debug(f"Stored {key} in {self.path}")
