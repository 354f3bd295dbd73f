"""Protocol for fetching one page of listings."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from private_server_finder.domain.models.fetch_result import FetchResult


class PageFetcherProtocol(Protocol):
    """Protocol for requesting a single page from the listing API."""

    async def fetch(self, cursor: str) -> "FetchResult":
        """Fetch the page addressed by a cursor.

        Args:
            cursor: Opaque pagination cursor; the empty string means the first page.

        Returns:
            PageFetched, RateLimited or TransportError. Never raises for
            network or HTTP failures.
        """
        ...
