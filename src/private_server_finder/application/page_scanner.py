"""Action-aware single-page browsing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from private_server_finder.application.rate_limit_coordinator import RateLimitCoordinator
from private_server_finder.domain.models import (
    PageAction,
    PageFetched,
    PageScanOutcome,
    PageScanStatus,
    RateLimited,
    TransportError,
)

if TYPE_CHECKING:
    from private_server_finder.domain.contracts import (
        PageFetcherProtocol,
        PageScanListenerProtocol,
    )
    from private_server_finder.domain.models import BrowserState

logger = logging.getLogger(__name__)


class PageScanner:
    """Fetches exactly one page per action and tracks the cursor position.

    Pagination state changes only when a fetch succeeds. A rate-limited
    fetch hands the captured action to the coordinator for replay.
    """

    def __init__(
        self,
        fetcher: PageFetcherProtocol,
        state: BrowserState,
        coordinator: RateLimitCoordinator | None = None,
        listener: PageScanListenerProtocol | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            fetcher: Fetches single pages from the listing API.
            state: Session state owning the pagination fields.
            coordinator: Schedules replays after HTTP 429.
            listener: Receives every outcome, including replays.
        """
        self._fetcher = fetcher
        self._state = state
        self.coordinator = coordinator or RateLimitCoordinator()
        self._listener = listener
        self.pending_action: PageAction | None = None
        self._in_flight = False

    def set_listener(self, listener: PageScanListenerProtocol | None) -> None:
        """Replace the outcome listener."""
        self._listener = listener

    @property
    def busy(self) -> bool:
        """Whether a request is in flight or a replay is pending."""
        return self._in_flight or self.coordinator.has_pending_retry

    async def scan(self, action: PageAction) -> PageScanOutcome:
        """Perform one page action.

        A call made while another scan is busy is dropped without a request.

        Args:
            action: RESET, REFRESH or NEXT.

        Returns:
            The scan outcome.
        """
        if self.busy:
            logger.debug(f"Dropping {action.value}: a page scan is already in progress")
            return PageScanOutcome(
                action=action,
                status=PageScanStatus.IN_FLIGHT,
                message="Already loading",
            )

        self._in_flight = True
        self.pending_action = action
        try:
            outcome = await self._scan(action)
        finally:
            self._in_flight = False

        if outcome.status is PageScanStatus.RATE_LIMITED:
            self.coordinator.schedule_retry(action, self.scan)

        if self._listener is not None:
            await self._listener.page_scanned(outcome)
        return outcome

    def _cursor_for(self, action: PageAction) -> str:
        pagination = self._state.pagination
        if action is PageAction.RESET:
            return ""
        if action is PageAction.NEXT:
            return pagination.next_cursor or ""
        return pagination.current_cursor

    async def _scan(self, action: PageAction) -> PageScanOutcome:
        pagination = self._state.pagination

        if action is PageAction.NEXT and not pagination.next_cursor:
            return PageScanOutcome(
                action=action,
                status=PageScanStatus.END_OF_PAGES,
                message="Last page reached",
            )

        cursor = self._cursor_for(action)
        result = await self._fetcher.fetch(cursor)

        if isinstance(result, RateLimited):
            delay = self.coordinator.delay_seconds
            return PageScanOutcome(
                action=action,
                status=PageScanStatus.RATE_LIMITED,
                message=f"Rate limited, retrying in {delay:g}s…",
            )

        if isinstance(result, TransportError):
            logger.error(f"Page scan ({action.value}) failed: {result.reason}")
            return PageScanOutcome(
                action=action,
                status=PageScanStatus.NETWORK_ERROR,
                message="Network error.",
            )

        self._apply(action, cursor, result)
        return PageScanOutcome(
            action=action,
            status=PageScanStatus.LOADED,
            message=f"Loaded page {pagination.current_page}.",
            listings=result.listings,
        )

    def _apply(self, action: PageAction, cursor: str, result: PageFetched) -> None:
        pagination = self._state.pagination
        if action is PageAction.RESET:
            pagination.reset()

        pagination.current_cursor = cursor
        pagination.next_cursor = result.next_cursor
        pagination.end_reached = result.next_cursor is None

        if action is PageAction.NEXT:
            pagination.current_page += 1
        if pagination.end_reached and pagination.max_pages:
            pagination.current_page = min(pagination.current_page, pagination.max_pages)

        logger.debug(
            f"Page {pagination.current_page} loaded with {len(result.listings)} listing(s), "
            f"end reached: {pagination.end_reached}"
        )
