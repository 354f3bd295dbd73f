"""Protocol for receiving page scan outcomes."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from private_server_finder.domain.models.scan_outcome import PageScanOutcome


class PageScanListenerProtocol(Protocol):
    """Receives every page scan outcome, including rate-limit replays."""

    async def page_scanned(self, outcome: "PageScanOutcome") -> None:
        """Handle the outcome of a page scan."""
        ...
