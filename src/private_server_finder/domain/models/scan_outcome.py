"""Outcomes reported by the scanners and the join service."""

from dataclasses import dataclass, field
from enum import Enum

from private_server_finder.domain.models.page_action import PageAction
from private_server_finder.domain.models.server_listing import ServerListing
from private_server_finder.domain.models.totals_snapshot import TotalsSnapshot


class PageScanStatus(Enum):
    """Result of a single-page scan."""

    LOADED = "loaded"
    IN_FLIGHT = "in_flight"
    END_OF_PAGES = "end_of_pages"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class PageScanOutcome:
    """What happened to one page scan request."""

    action: PageAction
    status: PageScanStatus
    message: str
    listings: list[ServerListing] = field(default_factory=list)

    @property
    def loaded(self) -> bool:
        """Whether the scan produced a page."""
        return self.status is PageScanStatus.LOADED


class TotalsScanStatus(Enum):
    """Result of a totals walk."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    SKIPPED = "skipped"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class TotalsScanOutcome:
    """What happened to one totals walk."""

    status: TotalsScanStatus
    message: str
    pages_scanned: int = 0
    snapshot: TotalsSnapshot | None = None


@dataclass(frozen=True)
class PageSummary:
    """Pagination summary handed to the presenter with each page."""

    current_page: int
    max_pages: int | None
    shown_count: int
    end_reached: bool


class JoinStatus(Enum):
    """Result of a join request."""

    JOINING = "joining"
    MISSING_HOST_CONTEXT = "missing_host_context"


@dataclass(frozen=True)
class JoinOutcome:
    """What happened to one join request."""

    status: JoinStatus
    message: str
    deeplink: str | None = None
