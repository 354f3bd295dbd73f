"""Full cursor walk computing aggregate occupancy totals."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from private_server_finder.application.occupancy import has_players, owner_inside
from private_server_finder.application.rate_limit_coordinator import (
    DEFAULT_RATE_LIMIT_DELAY_SECONDS,
)
from private_server_finder.domain.models import (
    CancellationToken,
    RateLimited,
    TotalsScanOutcome,
    TotalsScanStatus,
    TotalsSnapshot,
    TransportError,
)

if TYPE_CHECKING:
    from private_server_finder.application.totals_cache import TotalsCache
    from private_server_finder.domain.contracts import PageFetcherProtocol, PresenterProtocol
    from private_server_finder.domain.models import AggregateTotals, BrowserState, ServerListing

logger = logging.getLogger(__name__)


def accumulate(totals: AggregateTotals, listings: list[ServerListing]) -> None:
    """Add one page of listings to running totals."""
    totals.total_servers += len(listings)
    for listing in listings:
        if not has_players(listing):
            continue
        totals.servers_with_players += 1
        if not owner_inside(listing):
            totals.servers_with_players_no_owner += 1


class TotalsScanner:
    """Walks every page of listings and aggregates occupancy counts.

    A walk goes Idle -> Running -> Completed or Aborted. Only a completed
    walk is persisted; an aborted or failed walk leaves its partial counts
    in memory for display.
    """

    def __init__(
        self,
        fetcher: PageFetcherProtocol,
        cache: TotalsCache,
        presenter: PresenterProtocol | None = None,
        rate_limit_delay_seconds: float = DEFAULT_RATE_LIMIT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the scanner.

        Args:
            fetcher: Fetches single pages from the listing API.
            cache: Cache the completed snapshot is written to.
            presenter: Receives live progress, optional.
            rate_limit_delay_seconds: Wait before retrying a rate-limited page.
            sleep: Awaitable sleep used for the rate-limit wait.
        """
        self._fetcher = fetcher
        self._cache = cache
        self._presenter = presenter
        self.rate_limit_delay_seconds = rate_limit_delay_seconds
        self._sleep = sleep
        self.current_token: CancellationToken | None = None

    @property
    def running(self) -> bool:
        """Whether a walk is in progress."""
        return self.current_token is not None

    def abort(self) -> None:
        """Ask the running walk, if any, to stop at the next page boundary."""
        if self.current_token is not None:
            logger.info("Totals scan abort requested")
            self.current_token.cancel()

    async def run(
        self,
        state: BrowserState,
        *,
        force: bool = False,
        skip_totals: bool = False,
        token: CancellationToken | None = None,
    ) -> TotalsScanOutcome:
        """Run a totals walk, or fall back to the cache when skipping.

        Args:
            state: Session state; totals and page count are updated in place.
            force: Walk even if the user prefers to skip totals.
            skip_totals: The user's "skip totals scan" preference.
            token: Cancellation token for this walk; a fresh one by default.

        Returns:
            The walk outcome.
        """
        if skip_totals and not force:
            return await self._load_cached(state)

        token = token or CancellationToken()
        self.current_token = token
        try:
            return await self._walk(state, token)
        finally:
            if self.current_token is token:
                self.current_token = None

    async def _load_cached(self, state: BrowserState) -> TotalsScanOutcome:
        snapshot = await self._cache.load()
        if snapshot is not None:
            snapshot.apply_to(state.totals)
            state.pagination.max_pages = snapshot.max_pages
            if self._presenter:
                self._presenter.show_totals(state.totals)
        else:
            logger.debug("Skipping totals scan with no fresh cache")
        return TotalsScanOutcome(
            status=TotalsScanStatus.SKIPPED,
            message="Totals scan skipped by preference",
            snapshot=snapshot,
        )

    async def _walk(self, state: BrowserState, token: CancellationToken) -> TotalsScanOutcome:
        totals = state.totals
        totals.clear()
        cursor = ""
        pages = 0
        scanned = 0

        self._show_status("Scanning private servers…")
        logger.info("Starting totals scan")

        while not token.cancelled:
            result = await self._fetcher.fetch(cursor)

            if isinstance(result, RateLimited):
                logger.warning(
                    f"Totals scan rate limited on page {pages + 1}, "
                    f"retrying in {self.rate_limit_delay_seconds:g}s"
                )
                self._show_status(
                    f"Rate limited… waiting {self.rate_limit_delay_seconds:g}s"
                )
                await self._sleep(self.rate_limit_delay_seconds)
                continue

            if isinstance(result, TransportError):
                logger.error(f"Totals scan failed after {pages} page(s): {result.reason}")
                return TotalsScanOutcome(
                    status=TotalsScanStatus.NETWORK_ERROR,
                    message="Network error.",
                    pages_scanned=pages,
                )

            pages += 1
            scanned += len(result.listings)
            accumulate(totals, result.listings)
            if self._presenter:
                self._presenter.show_totals(totals, scanned)

            if not result.next_cursor:
                break
            cursor = result.next_cursor

        if token.cancelled:
            logger.info(f"Totals scan aborted after {pages} page(s)")
            return TotalsScanOutcome(
                status=TotalsScanStatus.ABORTED,
                message="Totals scan skipped",
                pages_scanned=pages,
            )

        max_pages = max(1, pages)
        state.pagination.max_pages = max_pages
        state.pagination.current_page = 1
        snapshot = await self._cache.save(TotalsSnapshot.from_totals(totals, max_pages, 0))
        logger.info(
            f"Totals scan complete: {totals.total_servers} servers, "
            f"{totals.servers_with_players} with players, {max_pages} page(s)"
        )
        return TotalsScanOutcome(
            status=TotalsScanStatus.COMPLETED,
            message="Totals scan complete",
            pages_scanned=pages,
            snapshot=snapshot,
        )

    def _show_status(self, text: str) -> None:
        if self._presenter:
            self._presenter.show_status(text)
