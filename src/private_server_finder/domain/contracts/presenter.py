"""Protocol for the presentation collaborator."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from private_server_finder.domain.models.occupancy import OccupancyInfo
    from private_server_finder.domain.models.pagination_state import AggregateTotals
    from private_server_finder.domain.models.scan_outcome import PageSummary
    from private_server_finder.domain.models.server_listing import ServerListing
    from private_server_finder.domain.models.user_settings import LastJoinedServer


class PresenterProtocol(Protocol):
    """Displays scan progress, pages and notices to the user."""

    def show_status(self, text: str) -> None:
        """Replace the one-line status text."""
        ...

    def notify(self, text: str, level: str = "info") -> None:
        """Show a transient notice.

        Args:
            text: Notice text.
            level: One of "info", "success", "warn" or "error".
        """
        ...

    def show_totals(self, totals: "AggregateTotals", scanned: int | None = None) -> None:
        """Display aggregate counts.

        Args:
            totals: Current aggregate counts.
            scanned: Listings scanned so far while a totals walk is running.
        """
        ...

    def show_page(
        self,
        entries: list[tuple["ServerListing", "OccupancyInfo"]],
        summary: "PageSummary",
        last_joined: "LastJoinedServer | None" = None,
    ) -> None:
        """Display one filtered page of listings.

        Args:
            entries: Listings that passed the filters, with their occupancy.
            summary: Pagination summary for the page.
            last_joined: The most recently joined server, if any.
        """
        ...

    def set_busy(self, busy: bool) -> None:
        """Enable or disable user actions while an operation runs."""
        ...
