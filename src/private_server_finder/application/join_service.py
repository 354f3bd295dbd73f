"""Joining a private server through the host."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import ValidationError

from private_server_finder.domain.clock import now_ms
from private_server_finder.domain.models import JoinOutcome, JoinStatus, LastJoinedServer

if TYPE_CHECKING:
    from private_server_finder.domain.contracts import (
        HostLocatorProtocol,
        KeyValueStoreProtocol,
    )
    from private_server_finder.domain.models import ServerListing

logger = logging.getLogger(__name__)

LAST_JOINED_KEY = "lastJoinedServer"
DEFAULT_DEEPLINK_SCHEME = "roblox"


def build_deeplink(place_id: int, access_code: str, scheme: str = DEFAULT_DEEPLINK_SCHEME) -> str:
    """Build the deep-link URI that joins a private server."""
    return f"{scheme}://placeId={place_id}&accessCode={access_code}"


class JoinService:
    """Records the joined server and dispatches the join to the host."""

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        host_locator: HostLocatorProtocol,
        place_id: int,
        deeplink_scheme: str = DEFAULT_DEEPLINK_SCHEME,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the join service.

        Args:
            store: Key-value store for the last joined server.
            host_locator: Finds the host able to start a session.
            place_id: Game place the private servers belong to.
            deeplink_scheme: URI scheme of the deep link.
            clock: Returns the current time in milliseconds.
        """
        self._store = store
        self._host_locator = host_locator
        self.place_id = place_id
        self.deeplink_scheme = deeplink_scheme
        self._clock = clock
        self.last_joined: LastJoinedServer | None = None

    async def load_last_joined(self) -> LastJoinedServer | None:
        """Load the last joined server from the store."""
        record = await self._store.get(LAST_JOINED_KEY)
        if not record:
            self.last_joined = None
            return None
        try:
            self.last_joined = LastJoinedServer.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable last joined server: {e}")
            self.last_joined = None
        return self.last_joined

    async def join(self, listing: ServerListing, use_deeplink: bool) -> JoinOutcome:
        """Join a listing's private server.

        The listing is remembered as last joined even when no host is found.

        Args:
            listing: The chosen listing.
            use_deeplink: Open a deep link instead of the host's join routine.

        Returns:
            JOINING, or MISSING_HOST_CONTEXT when no host is running.
        """
        self.last_joined = LastJoinedServer(id=listing.id, ts=self._clock())
        await self._store.set(LAST_JOINED_KEY, self.last_joined.model_dump())

        host = self._host_locator.find_host()
        if host is None:
            logger.warning(f"Cannot join {listing.id}: no host available")
            return JoinOutcome(
                status=JoinStatus.MISSING_HOST_CONTEXT,
                message="Open the game tab first",
            )

        access_code = listing.access_code or ""
        if use_deeplink:
            deeplink = build_deeplink(self.place_id, access_code, self.deeplink_scheme)
            host.open_uri(deeplink)
            logger.info(f"Joining {listing.id} via deep link")
            return JoinOutcome(status=JoinStatus.JOINING, message="Joining…", deeplink=deeplink)

        host.invoke_join(self.place_id, access_code)
        logger.info(f"Joining {listing.id} via host join routine")
        return JoinOutcome(status=JoinStatus.JOINING, message="Joining…")
