"""Time-boxed persistence of the totals snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import ValidationError

from private_server_finder.domain.clock import now_ms
from private_server_finder.domain.models import TotalsSnapshot

if TYPE_CHECKING:
    from private_server_finder.domain.contracts import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

TOTALS_CACHE_KEY = "totalsCache"
DEFAULT_TTL_MS = 10 * 60 * 1000


class TotalsCache:
    """Read-through cache for the last completed totals walk."""

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Key-value store holding the snapshot.
            ttl_ms: Maximum snapshot age in milliseconds.
            clock: Returns the current time in milliseconds.
        """
        self._store = store
        self.ttl_ms = ttl_ms
        self._clock = clock

    async def load(self) -> TotalsSnapshot | None:
        """Return the stored snapshot if it is still fresh, else None."""
        record = await self._store.get(TOTALS_CACHE_KEY)
        if not record:
            return None

        try:
            snapshot = TotalsSnapshot.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable totals cache: {e}")
            return None

        if not snapshot.is_fresh(self._clock(), self.ttl_ms):
            logger.debug(f"Totals cache from {snapshot.timestamp} is stale")
            return None
        return snapshot

    async def save(self, snapshot: TotalsSnapshot) -> TotalsSnapshot:
        """Replace the stored snapshot, stamped with the current time.

        Returns:
            The snapshot as stored.
        """
        stamped = snapshot.model_copy(update={"timestamp": self._clock()})
        await self._store.set(TOTALS_CACHE_KEY, stamped.to_record())
        logger.info(
            f"Saved totals cache: {stamped.total_servers} servers, {stamped.max_pages} page(s)"
        )
        return stamped
