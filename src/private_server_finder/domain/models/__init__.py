"""Domain models for the private server finder."""

from private_server_finder.domain.models.cancellation_token import CancellationToken
from private_server_finder.domain.models.fetch_result import (
    FetchResult,
    PageFetched,
    RateLimited,
    TransportError,
)
from private_server_finder.domain.models.occupancy import ListingFilters, OccupancyInfo
from private_server_finder.domain.models.page_action import PageAction
from private_server_finder.domain.models.pagination_state import (
    AggregateTotals,
    BrowserState,
    PaginationState,
)
from private_server_finder.domain.models.scan_outcome import (
    JoinOutcome,
    JoinStatus,
    PageScanOutcome,
    PageScanStatus,
    PageSummary,
    TotalsScanOutcome,
    TotalsScanStatus,
)
from private_server_finder.domain.models.server_listing import (
    ServerListing,
    ServerOwner,
    ServerPlayer,
)
from private_server_finder.domain.models.totals_snapshot import TotalsSnapshot
from private_server_finder.domain.models.user_settings import LastJoinedServer, UserSettings

__all__ = [
    "AggregateTotals",
    "BrowserState",
    "CancellationToken",
    "FetchResult",
    "JoinOutcome",
    "JoinStatus",
    "LastJoinedServer",
    "ListingFilters",
    "OccupancyInfo",
    "PageAction",
    "PageFetched",
    "PageScanOutcome",
    "PageScanStatus",
    "PageSummary",
    "PaginationState",
    "RateLimited",
    "ServerListing",
    "ServerOwner",
    "ServerPlayer",
    "TotalsScanOutcome",
    "TotalsScanStatus",
    "TotalsSnapshot",
    "TransportError",
    "UserSettings",
]
