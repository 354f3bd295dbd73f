"""Browse pagination and aggregate totals state."""

from dataclasses import dataclass, field


@dataclass
class PaginationState:
    """Cursor position of the single-page browser.

    ``end_reached`` is true exactly when ``next_cursor`` is None after the
    most recent successful fetch. ``max_pages`` is None until a totals walk
    (or the totals cache) has established it.
    """

    current_cursor: str = ""
    next_cursor: str | None = None
    end_reached: bool = False
    current_page: int = 1
    max_pages: int | None = None

    def reset(self) -> None:
        """Move back to the first page, keeping the known page count."""
        self.current_cursor = ""
        self.next_cursor = None
        self.end_reached = False
        self.current_page = 1


@dataclass
class AggregateTotals:
    """Running aggregate counts over all listings."""

    total_servers: int = 0
    servers_with_players: int = 0
    servers_with_players_no_owner: int = 0

    def clear(self) -> None:
        """Zero all counters."""
        self.total_servers = 0
        self.servers_with_players = 0
        self.servers_with_players_no_owner = 0


@dataclass
class BrowserState:
    """State owned by one browsing session and shared by both scanners."""

    pagination: PaginationState = field(default_factory=PaginationState)
    totals: AggregateTotals = field(default_factory=AggregateTotals)
