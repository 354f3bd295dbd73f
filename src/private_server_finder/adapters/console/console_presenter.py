"""Plain-text presenter writing to a stream."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, TextIO

from private_server_finder.domain.clock import now_ms
from private_server_finder.domain.contracts.presenter import PresenterProtocol

if TYPE_CHECKING:
    from private_server_finder.domain.models import (
        AggregateTotals,
        LastJoinedServer,
        OccupancyInfo,
        PageSummary,
        ServerListing,
    )

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"


def format_count(value: int) -> str:
    """Format an aggregate count; zero means not yet known."""
    return str(value) if value else PLACEHOLDER


def format_page_info(current_page: int, max_pages: int | None) -> str:
    """Format the "Page N / M" indicator."""
    return f"Page {current_page} / {max_pages or PLACEHOLDER}"


class ConsolePresenter(PresenterProtocol):
    """Renders status, totals and listings as text lines."""

    def __init__(
        self, stream: TextIO | None = None, clock: Callable[[], int] = now_ms
    ) -> None:
        """Initialize the presenter.

        Args:
            stream: Output stream, stdout by default.
            clock: Returns the current time in milliseconds.
        """
        self._stream = stream or sys.stdout
        self._clock = clock
        self.status = ""
        self.busy = False

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    def show_status(self, text: str) -> None:
        """Print the new status line."""
        self.status = text
        self._write(f"[status] {text}")

    def notify(self, text: str, level: str = "info") -> None:
        """Print a notice tagged with its level."""
        self._write(f"[{level}] {text}")

    def show_totals(self, totals: AggregateTotals, scanned: int | None = None) -> None:
        """Print aggregate counts, with scan progress while walking."""
        line = (
            f"Total servers: {format_count(totals.total_servers)} | "
            f"With players: {format_count(totals.servers_with_players)} | "
            f"Without owner: {format_count(totals.servers_with_players_no_owner)}"
        )
        if scanned is not None:
            line += f" | {scanned} scanned"
        self._write(line)

    def show_page(
        self,
        entries: list[tuple[ServerListing, OccupancyInfo]],
        summary: PageSummary,
        last_joined: LastJoinedServer | None = None,
    ) -> None:
        """Print one page as a numbered list; numbers are what `join` takes."""
        self._write(format_page_info(summary.current_page, summary.max_pages))
        for number, (listing, info) in enumerate(entries, start=1):
            self._write(f"{number}. {self._format_entry(listing, info, last_joined)}")

    def _format_entry(
        self, listing: ServerListing, info: OccupancyInfo, last_joined: LastJoinedServer | None
    ) -> str:
        title = listing.display_name
        if last_joined is not None and last_joined.id == listing.id:
            title += f" [Recently joined · {last_joined.time_ago(self._clock())}]"
        if info.owner_inside:
            title += " ⚠ owner inside"
        return f"{title}\n    Owner: {listing.owner_name} • Players: {info.player_count}"

    def set_busy(self, busy: bool) -> None:
        """Track whether actions are currently disabled."""
        self.busy = busy
        logger.debug(f"Busy: {busy}")
