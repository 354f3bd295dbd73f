"""Browsing session: startup sequence and user actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from private_server_finder.application.occupancy import select_listings
from private_server_finder.domain.models import (
    JoinStatus,
    PageAction,
    PageScanStatus,
    PageSummary,
    TotalsScanStatus,
    UserSettings,
)

if TYPE_CHECKING:
    from private_server_finder.application.join_service import JoinService
    from private_server_finder.application.page_scanner import PageScanner
    from private_server_finder.application.settings_service import SettingsService
    from private_server_finder.application.totals_cache import TotalsCache
    from private_server_finder.application.totals_scanner import TotalsScanner
    from private_server_finder.domain.contracts import PresenterProtocol
    from private_server_finder.domain.models import (
        BrowserState,
        JoinOutcome,
        LastJoinedServer,
        OccupancyInfo,
        PageScanOutcome,
        ServerListing,
        TotalsScanOutcome,
    )

logger = logging.getLogger(__name__)


def pin_last_joined(
    entries: list[tuple[ServerListing, OccupancyInfo]], last_joined: LastJoinedServer | None
) -> list[tuple[ServerListing, OccupancyInfo]]:
    """Move the last joined server to the front, keeping the rest in API order."""
    if last_joined is None:
        return list(entries)
    return sorted(entries, key=lambda entry: entry[0].id != last_joined.id)

_TOTALS_NOTICE_LEVELS = {
    TotalsScanStatus.COMPLETED: "success",
    TotalsScanStatus.ABORTED: "warn",
    TotalsScanStatus.NETWORK_ERROR: "error",
}


class BrowserSession:
    """Drives the scanners from startup and user actions and renders results.

    Callers serialize totals walks and page scans; only page scans are
    guarded against concurrent use.
    """

    def __init__(
        self,
        state: BrowserState,
        page_scanner: PageScanner,
        totals_scanner: TotalsScanner,
        totals_cache: TotalsCache,
        settings_service: SettingsService,
        join_service: JoinService,
        presenter: PresenterProtocol,
    ) -> None:
        """Initialize the session and register as the page scan listener.

        Args:
            state: Session state shared by both scanners.
            page_scanner: Single-page browser.
            totals_scanner: Full totals walker.
            totals_cache: Cache for the totals snapshot.
            settings_service: User preference persistence.
            join_service: Join dispatch and last joined tracking.
            presenter: Output collaborator.
        """
        self.state = state
        self.page_scanner = page_scanner
        self.totals_scanner = totals_scanner
        self.totals_cache = totals_cache
        self.settings_service = settings_service
        self.join_service = join_service
        self.presenter = presenter
        self.settings = UserSettings()
        self.last_page: list[ServerListing] = []
        self.visible: list[tuple[ServerListing, OccupancyInfo]] = []
        self._busy = False
        page_scanner.set_listener(self)

    async def start(self) -> None:
        """Run the startup sequence.

        Settings and cached totals are loaded first so they show immediately,
        then a totals walk runs unless skipped, then the first page loads.
        """
        await self.join_service.load_last_joined()
        self.settings = await self.settings_service.load()

        snapshot = await self.totals_cache.load()
        if snapshot is not None:
            snapshot.apply_to(self.state.totals)
            self.state.pagination.max_pages = snapshot.max_pages
            logger.info(f"Loaded cached totals: {snapshot.total_servers} servers")
        self.presenter.show_totals(self.state.totals)

        if not self.settings.skip_totals:
            await self.scan_totals()
        await self.first_page()

    # Totals

    async def scan_totals(self, force: bool = False) -> TotalsScanOutcome:
        """Run a totals walk, honoring the skip preference unless forced."""
        self._set_busy(True)
        try:
            outcome = await self.totals_scanner.run(
                self.state, force=force, skip_totals=self.settings.skip_totals
            )
        finally:
            self._set_busy(False)

        level = _TOTALS_NOTICE_LEVELS.get(outcome.status)
        if level is not None:
            self.presenter.notify(outcome.message, level)
        self.presenter.show_totals(self.state.totals)
        self.presenter.show_status(
            outcome.message if outcome.status is TotalsScanStatus.NETWORK_ERROR else "Ready"
        )
        return outcome

    async def rescan_totals(self) -> TotalsScanOutcome:
        """Force a totals walk even when the user skips totals."""
        return await self.scan_totals(force=True)

    def skip_totals_scan(self) -> None:
        """Abort the running totals walk, keeping its partial counts."""
        self.totals_scanner.abort()
        self._set_busy(False)

    # Page browsing

    async def first_page(self) -> PageScanOutcome:
        """Load the first page."""
        return await self._scan(PageAction.RESET)

    async def refresh(self) -> PageScanOutcome:
        """Reload the current page."""
        return await self._scan(PageAction.REFRESH)

    async def next_page(self) -> PageScanOutcome:
        """Load the next page."""
        return await self._scan(PageAction.NEXT)

    async def _scan(self, action: PageAction) -> PageScanOutcome:
        if not self.page_scanner.busy:
            self._set_busy(True)
            self.presenter.show_status("Loading servers…")
        return await self.page_scanner.scan(action)

    async def page_scanned(self, outcome: PageScanOutcome) -> None:
        """Render a page scan outcome."""
        if outcome.status is PageScanStatus.RATE_LIMITED:
            # Stay busy until the replay finishes
            self.presenter.show_status(outcome.message)
            return

        self._set_busy(False)
        if outcome.status is PageScanStatus.END_OF_PAGES:
            self.presenter.notify(outcome.message, "warn")
            return
        if outcome.status is PageScanStatus.NETWORK_ERROR:
            self.presenter.show_status(outcome.message)
            return
        if outcome.loaded:
            self.last_page = outcome.listings
            self._render_page()

    def _render_page(self) -> None:
        pagination = self.state.pagination
        entries = pin_last_joined(
            select_listings(self.last_page, self.settings.filters), self.join_service.last_joined
        )
        self.visible = entries
        summary = PageSummary(
            current_page=pagination.current_page,
            max_pages=pagination.max_pages,
            shown_count=len(entries),
            end_reached=pagination.end_reached,
        )
        self.presenter.show_page(entries, summary, self.join_service.last_joined)
        self.presenter.show_totals(self.state.totals)
        self.presenter.show_status(self._page_status(summary))

    @property
    def busy(self) -> bool:
        """Whether a totals walk or page scan is running or waiting on a retry."""
        return self._busy or self.page_scanner.busy or self.totals_scanner.running

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self.presenter.set_busy(busy)

    @staticmethod
    def _page_status(summary: PageSummary) -> str:
        if summary.shown_count == 0:
            return "No servers found."
        if summary.end_reached:
            return f"Loaded {summary.shown_count} servers. (Last page)"
        return f"Loaded {summary.shown_count} servers."

    # Settings

    async def _update_settings(self, **changes: bool) -> None:
        self.settings = self.settings.model_copy(update=changes)
        await self.settings_service.save(self.settings)

    async def set_skip_totals(self, enabled: bool) -> None:
        """Persist the "skip totals scan" preference."""
        await self._update_settings(skip_totals=enabled)

    async def set_use_deeplink(self, enabled: bool) -> None:
        """Persist the "join via deep link" preference."""
        await self._update_settings(use_deeplink=enabled)

    async def set_show_owner_inside(self, enabled: bool) -> PageScanOutcome:
        """Persist the owner-inside filter and refresh the current page."""
        await self._update_settings(show_owner_inside=enabled)
        return await self.refresh()

    async def set_only_one_player(self, enabled: bool) -> PageScanOutcome:
        """Persist the one-player filter and refresh the current page."""
        await self._update_settings(only_one_player=enabled)
        return await self.refresh()

    # Joining

    async def join(self, listing: ServerListing) -> JoinOutcome:
        """Join a listing and report the result."""
        outcome = await self.join_service.join(listing, use_deeplink=self.settings.use_deeplink)
        level = "success" if outcome.status is JoinStatus.JOINING else "error"
        self.presenter.notify(outcome.message, level)
        if self.last_page:
            self._render_page()
        return outcome

    async def close(self) -> None:
        """Stop background work."""
        self.totals_scanner.abort()
        await self.page_scanner.coordinator.cancel()
