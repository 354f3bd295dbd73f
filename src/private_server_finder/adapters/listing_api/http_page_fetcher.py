"""aiohttp implementation of the listing page fetcher."""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp
from pydantic import ValidationError

from private_server_finder.adapters.api_request_logger import log_api_request
from private_server_finder.adapters.listing_api.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    EXCLUDE_FULL_GAMES,
    PAGE_LIMIT,
    SORT_ORDER,
    private_servers_url,
)
from private_server_finder.domain.contracts.page_fetcher import PageFetcherProtocol
from private_server_finder.domain.models import (
    FetchResult,
    PageFetched,
    RateLimited,
    ServerListing,
    TransportError,
)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)


class HttpPageFetcher(PageFetcherProtocol):
    """Requests one page of private servers and classifies the response."""

    def __init__(
        self,
        session: "ClientSession",
        place_id: int,
        base_url: str = DEFAULT_BASE_URL,
        page_limit: int = PAGE_LIMIT,
        sort_order: str = SORT_ORDER,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        auth_cookie: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: Shared aiohttp session.
            place_id: Game place whose private servers are listed.
            base_url: Listing API base URL.
            page_limit: Listings per page.
            sort_order: "Desc" or "Asc".
            timeout_seconds: Total timeout per request.
            auth_cookie: Cookie header value identifying the user, optional.
        """
        self._session = session
        self._url = private_servers_url(base_url, place_id)
        self._page_limit = page_limit
        self._sort_order = sort_order
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._headers = {"accept": "application/json"}
        if auth_cookie:
            self._headers["Cookie"] = auth_cookie

    def _params(self, cursor: str) -> dict[str, str | int]:
        return {
            "limit": self._page_limit,
            "sortOrder": self._sort_order,
            "excludeFullGames": EXCLUDE_FULL_GAMES,
            "cursor": cursor,
        }

    async def fetch(self, cursor: str) -> FetchResult:
        """Fetch one page.

        Args:
            cursor: Opaque cursor; the empty string requests the first page.

        Returns:
            PageFetched on success, RateLimited on HTTP 429, TransportError otherwise.
        """
        params = self._params(cursor)
        log_api_request("GET", self._url, params=params, headers=self._headers)

        try:
            async with self._session.get(
                self._url, params=params, headers=self._headers, timeout=self._timeout
            ) as response:
                return await self._handle_response(response)
        except (aiohttp.ClientError, TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"Listing request failed: {reason}")
            return TransportError(reason=reason)

    async def _handle_response(self, response: "ClientResponse") -> FetchResult:
        if response.status == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(f"Listing API rate limited (Retry-After: {retry_after or 'n/a'})")
            return RateLimited(retry_after=retry_after)

        if response.status != 200:
            body = await response.text(errors="replace")
            logger.error(f"Listing API returned status {response.status}: {body[:200]}")
            return TransportError(reason=f"HTTP {response.status}", status_code=response.status)

        try:
            data = await response.json(content_type=None)
        except ValueError as e:
            logger.error(f"Listing API returned invalid JSON: {e}")
            return TransportError(reason="Invalid JSON response", status_code=response.status)

        if not isinstance(data, dict):
            return TransportError(reason="Unexpected response shape", status_code=response.status)

        records = data.get("data") or []
        if not isinstance(records, list):
            return TransportError(reason="Unexpected response shape", status_code=response.status)

        return PageFetched(
            next_cursor=data.get("nextPageCursor") or None,
            listings=self._parse_listings(records),
        )

    @staticmethod
    def _parse_listings(records: list[Any]) -> list[ServerListing]:
        listings = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                listings.append(ServerListing.from_api(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed listing {record.get('id')}: {e}")
        return listings
