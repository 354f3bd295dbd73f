"""Outcomes of a single listing page request."""

from dataclasses import dataclass, field

from private_server_finder.domain.models.server_listing import ServerListing


@dataclass(frozen=True)
class PageFetched:
    """A page was returned; ``next_cursor`` is None on the last page."""

    next_cursor: str | None
    listings: list[ServerListing] = field(default_factory=list)


@dataclass(frozen=True)
class RateLimited:
    """The upstream answered HTTP 429."""

    retry_after: str | None = None


@dataclass(frozen=True)
class TransportError:
    """The request failed (network, timeout or unexpected response)."""

    reason: str
    status_code: int | None = None


FetchResult = PageFetched | RateLimited | TransportError
