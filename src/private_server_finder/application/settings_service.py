"""Loading and saving user preferences."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from private_server_finder.domain.models import UserSettings

if TYPE_CHECKING:
    from private_server_finder.domain.contracts import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"


class SettingsService:
    """Persists the whole settings record on every change."""

    def __init__(self, store: KeyValueStoreProtocol) -> None:
        """Initialize with the key-value store."""
        self._store = store

    async def load(self) -> UserSettings:
        """Load stored settings; missing or unreadable values fall back to defaults."""
        record = await self._store.get(SETTINGS_KEY)
        if not isinstance(record, dict):
            return UserSettings()
        try:
            return UserSettings.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable settings: {e}")
            return UserSettings()

    async def save(self, settings: UserSettings) -> None:
        """Store the full settings record."""
        await self._store.set(SETTINGS_KEY, settings.model_dump(by_alias=True))
        logger.debug(f"Saved settings: {settings}")
