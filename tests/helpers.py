"""Test doubles shared across the test suite."""

import asyncio
from collections.abc import Callable

from private_server_finder.adapters.storage import MemoryStore
from private_server_finder.application.browser_session import BrowserSession
from private_server_finder.application.join_service import JoinService
from private_server_finder.application.page_scanner import PageScanner
from private_server_finder.application.rate_limit_coordinator import RateLimitCoordinator
from private_server_finder.application.settings_service import SettingsService
from private_server_finder.application.totals_cache import TotalsCache
from private_server_finder.application.totals_scanner import TotalsScanner
from private_server_finder.domain.contracts import PageFetcherProtocol
from private_server_finder.domain.models import (
    AggregateTotals,
    BrowserState,
    FetchResult,
    LastJoinedServer,
    OccupancyInfo,
    PageFetched,
    PageSummary,
    ServerListing,
)


def make_listing(
    server_id: int | str,
    owner_id: int | None = 1,
    player_ids: list[int] | None = None,
    tokens: list[str] | None = None,
    access_code: str = "access-code",
    name: str | None = None,
) -> ServerListing:
    """Build a listing the way the API would return it."""
    record: dict = {"id": server_id, "accessCode": access_code}
    if name is not None:
        record["name"] = name
    if owner_id is not None:
        record["owner"] = {"id": owner_id, "name": f"owner-{owner_id}"}
    if player_ids is not None:
        record["players"] = [{"id": player_id} for player_id in player_ids]
    if tokens is not None:
        record["playerTokens"] = tokens
    return ServerListing.from_api(record)


def empty_listings(count: int, start: int = 0) -> list[ServerListing]:
    """Listings with nobody inside."""
    return [make_listing(start + i, player_ids=[]) for i in range(count)]


def occupied_listings(
    count: int, start: int = 0, owner_inside: bool = False
) -> list[ServerListing]:
    """Listings with one non-owner player, optionally with the owner inside too."""
    players = [1, 42] if owner_inside else [42]
    return [make_listing(start + i, owner_id=1, player_ids=players) for i in range(count)]


def page(listings: list[ServerListing], next_cursor: str | None = None) -> PageFetched:
    """A successful fetch result."""
    return PageFetched(next_cursor=next_cursor, listings=listings)


class ScriptedFetcher:
    """Returns pre-scripted results in order and records requested cursors."""

    def __init__(
        self,
        results: list[FetchResult],
        on_fetch: Callable[[str, int], None] | None = None,
    ) -> None:
        """Initialize with the results to return."""
        self.results = list(results)
        self.cursors: list[str] = []
        self._on_fetch = on_fetch

    async def fetch(self, cursor: str) -> FetchResult:
        """Return the next scripted result."""
        self.cursors.append(cursor)
        if self._on_fetch is not None:
            self._on_fetch(cursor, len(self.cursors))
        if not self.results:
            raise AssertionError(f"Unexpected fetch for cursor {cursor!r}")
        return self.results.pop(0)


class BlockingFetcher:
    """Blocks every fetch until released."""

    def __init__(self, result: FetchResult) -> None:
        """Initialize with the result returned once released."""
        self.result = result
        self.release = asyncio.Event()
        self.cursors: list[str] = []

    async def fetch(self, cursor: str) -> FetchResult:
        """Wait for release, then return the result."""
        self.cursors.append(cursor)
        await self.release.wait()
        return self.result


class RecordingSleep:
    """Awaitable sleep that returns immediately and records delays."""

    def __init__(self) -> None:
        """Initialize with no recorded delays."""
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        """Record the delay and yield to the event loop."""
        self.delays.append(seconds)
        await asyncio.sleep(0)


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        """Initialize at a fixed time."""
        self.now = now

    def __call__(self) -> int:
        """Return the current fake time."""
        return self.now

    def advance(self, ms: int) -> None:
        """Move the clock forward."""
        self.now += ms


class RecordingPresenter:
    """Presenter that records everything it is asked to show."""

    def __init__(self) -> None:
        """Initialize empty recordings."""
        self.statuses: list[str] = []
        self.notices: list[tuple[str, str]] = []
        self.totals: list[tuple[int, int, int, int | None]] = []
        self.pages: list[tuple[list[tuple[ServerListing, OccupancyInfo]], PageSummary]] = []
        self.last_joined: list[LastJoinedServer | None] = []
        self.busy: list[bool] = []

    def show_status(self, text: str) -> None:
        """Record a status line."""
        self.statuses.append(text)

    def notify(self, text: str, level: str = "info") -> None:
        """Record a notice."""
        self.notices.append((text, level))

    def show_totals(self, totals: AggregateTotals, scanned: int | None = None) -> None:
        """Record a copy of the totals."""
        self.totals.append(
            (
                totals.total_servers,
                totals.servers_with_players,
                totals.servers_with_players_no_owner,
                scanned,
            )
        )

    def show_page(
        self,
        entries: list[tuple[ServerListing, OccupancyInfo]],
        summary: PageSummary,
        last_joined: LastJoinedServer | None = None,
    ) -> None:
        """Record a rendered page."""
        self.pages.append((entries, summary))
        self.last_joined.append(last_joined)

    def set_busy(self, busy: bool) -> None:
        """Record busy toggles."""
        self.busy.append(busy)


class FakeHost:
    """Host that records join requests."""

    def __init__(self) -> None:
        """Initialize empty recordings."""
        self.opened: list[str] = []
        self.joins: list[tuple[int, str]] = []

    def open_uri(self, uri: str) -> None:
        """Record an opened URI."""
        self.opened.append(uri)

    def invoke_join(self, place_id: int, access_code: str) -> None:
        """Record a native join."""
        self.joins.append((place_id, access_code))


class FakeHostLocator:
    """Returns a fixed host, or None."""

    def __init__(self, host: FakeHost | None) -> None:
        """Initialize with the host to return."""
        self.host = host

    def find_host(self) -> FakeHost | None:
        """Return the configured host."""
        return self.host


PLACE_ID = 109983668079237


def wire_session(
    fetcher: PageFetcherProtocol,
    store: MemoryStore | None = None,
    host: FakeHost | None = None,
) -> tuple[BrowserSession, RecordingPresenter]:
    """Wire a browsing session over fakes, with instant rate-limit waits."""
    store = store or MemoryStore()
    clock = FakeClock()
    presenter = RecordingPresenter()
    state = BrowserState()
    sleep = RecordingSleep()
    cache = TotalsCache(store, clock=clock)
    session = BrowserSession(
        state=state,
        page_scanner=PageScanner(fetcher, state, RateLimitCoordinator(sleep=sleep)),
        totals_scanner=TotalsScanner(fetcher, cache, presenter, sleep=sleep),
        totals_cache=cache,
        settings_service=SettingsService(store),
        join_service=JoinService(store, FakeHostLocator(host), PLACE_ID, clock=clock),
        presenter=presenter,
    )
    return session, presenter
