"""Tests for the browsing session flows."""

import pytest

from private_server_finder.adapters.storage import MemoryStore
from private_server_finder.application.browser_session import BrowserSession
from private_server_finder.application.join_service import LAST_JOINED_KEY
from private_server_finder.application.settings_service import SETTINGS_KEY
from private_server_finder.application.totals_cache import TOTALS_CACHE_KEY
from private_server_finder.domain.models import (
    JoinStatus,
    PageScanStatus,
    RateLimited,
    TotalsScanStatus,
    TransportError,
)
from tests.helpers import (
    PLACE_ID,
    FakeClock,
    FakeHost,
    RecordingPresenter,
    ScriptedFetcher,
    empty_listings,
    make_listing,
    occupied_listings,
    page,
    wire_session,
)


def skipping_store() -> MemoryStore:
    """A store whose settings skip the totals walk."""
    return MemoryStore({SETTINGS_KEY: {"skipTotals": True}})


def build(
    results: list,
    store: MemoryStore | None = None,
    host: FakeHost | None = None,
) -> tuple[BrowserSession, ScriptedFetcher, MemoryStore, RecordingPresenter]:
    """Wire a session over a scripted fetcher."""
    store = store or MemoryStore()
    fetcher = ScriptedFetcher(results)
    session, presenter = wire_session(fetcher, store, host)
    return session, fetcher, store, presenter


@pytest.mark.asyncio
async def test_startup_walks_totals_then_loads_first_page() -> None:
    """Given default settings, when starting, then totals are walked before page 1 is shown."""
    results = [
        page(empty_listings(3) + occupied_listings(2, start=3)),
        page(empty_listings(3) + occupied_listings(2, start=3)),
    ]
    session, fetcher, store, presenter = build(results)

    await session.start()

    assert fetcher.cursors == ["", ""]
    assert presenter.totals[0] == (0, 0, 0, None)
    assert (5, 2, 2, 5) in presenter.totals
    assert ("Totals scan complete", "success") in presenter.notices
    entries, summary = presenter.pages[-1]
    assert [listing.id for listing, _ in entries] == [3, 4]
    assert summary.max_pages == 1
    assert summary.end_reached is True
    assert presenter.statuses[-1] == "Loaded 2 servers. (Last page)"
    assert presenter.busy[-1] is False
    assert (await store.get(TOTALS_CACHE_KEY))["totalServers"] == 5


@pytest.mark.asyncio
async def test_startup_with_skip_uses_cached_totals_only() -> None:
    """Given skip totals and a fresh cache, when starting, then cached totals show and only page 1 loads."""
    clock = FakeClock()
    store = MemoryStore(
        {
            SETTINGS_KEY: {"skipTotals": True},
            TOTALS_CACHE_KEY: {
                "ts": clock(),
                "totalServers": 250,
                "serversWithPlayers": 4,
                "serversWithPlayersNoOwner": 3,
                "maxPages": 3,
            },
        }
    )
    session, fetcher, _, presenter = build([page(empty_listings(2), next_cursor="c1")], store)

    await session.start()

    assert fetcher.cursors == [""]
    assert presenter.totals[0] == (250, 4, 3, None)
    _, summary = presenter.pages[-1]
    assert summary.max_pages == 3
    assert presenter.statuses[-1] == "No servers found."


@pytest.mark.asyncio
async def test_toggling_filter_persists_and_refreshes_current_page() -> None:
    """Given a loaded page, when showing owner-inside servers, then the setting is saved and the page reloaded."""
    with_owner = occupied_listings(1, start=10, owner_inside=True)
    results = [page(with_owner, next_cursor="c1"), page(with_owner, next_cursor="c1")]
    session, fetcher, store, presenter = build(results, skipping_store())
    await session.start()
    assert presenter.pages[-1][0] == []

    outcome = await session.set_show_owner_inside(True)

    assert outcome.status is PageScanStatus.LOADED
    assert fetcher.cursors == ["", ""]
    assert (await store.get(SETTINGS_KEY))["showOwnerInside"] is True
    entries, _ = presenter.pages[-1]
    assert [listing.id for listing, _ in entries] == [10]
    assert entries[0][1].owner_inside is True


@pytest.mark.asyncio
async def test_saving_preferences_without_refresh() -> None:
    """Given preference changes that do not affect filtering, when set, then they are only persisted."""
    session, fetcher, store, _ = build([])

    await session.set_skip_totals(True)
    await session.set_use_deeplink(True)

    assert fetcher.cursors == []
    assert await store.get(SETTINGS_KEY) == {
        "skipTotals": True,
        "showOwnerInside": False,
        "onlyOnePlayer": False,
        "useDeeplink": True,
    }


@pytest.mark.asyncio
async def test_next_at_end_warns_without_request() -> None:
    """Given the last page, when moving next, then a warning is shown and nothing is fetched."""
    session, fetcher, _, presenter = build([page(occupied_listings(1))], skipping_store())
    await session.start()

    outcome = await session.next_page()

    assert outcome.status is PageScanStatus.END_OF_PAGES
    assert fetcher.cursors == [""]
    assert presenter.notices[-1] == ("Last page reached", "warn")
    assert presenter.busy[-1] is False


@pytest.mark.asyncio
async def test_rate_limited_page_stays_busy_until_replay() -> None:
    """Given a 429 on page 1, when the replay succeeds, then busy clears and the page renders."""
    results = [RateLimited(), page(occupied_listings(1))]
    session, fetcher, _, presenter = build(results, skipping_store())

    await session.start()

    assert presenter.statuses[-1] == "Rate limited, retrying in 5s…"
    assert presenter.busy[-1] is True
    assert session.page_scanner.busy is True

    await session.page_scanner.coordinator.wait_for_retry()

    assert fetcher.cursors == ["", ""]
    assert presenter.busy[-1] is False
    assert presenter.statuses[-1] == "Loaded 1 servers. (Last page)"


@pytest.mark.asyncio
async def test_rescan_forces_walk_when_skipping() -> None:
    """Given skip totals, when rescanning, then a full walk runs and is cached."""
    store = skipping_store()
    session, fetcher, _, presenter = build([page(empty_listings(4))], store)
    session.settings = await session.settings_service.load()

    outcome = await session.rescan_totals()

    assert outcome.status is TotalsScanStatus.COMPLETED
    assert fetcher.cursors == [""]
    assert (await store.get(TOTALS_CACHE_KEY))["totalServers"] == 4
    assert presenter.statuses[-1] == "Ready"


@pytest.mark.asyncio
async def test_totals_network_error_is_reported() -> None:
    """Given a failing walk, when scanning totals, then the error is shown."""
    session, _, _, presenter = build([TransportError(reason="down")])

    outcome = await session.scan_totals()

    assert outcome.status is TotalsScanStatus.NETWORK_ERROR
    assert presenter.notices[-1] == ("Network error.", "error")
    assert presenter.statuses[-1] == "Network error."


@pytest.mark.asyncio
async def test_join_marks_server_as_recently_joined() -> None:
    """Given a loaded page, when joining a server, then the host is used and the page re-renders."""
    host = FakeHost()
    listing = make_listing(7, owner_id=1, player_ids=[2], access_code="code-7")
    store = MemoryStore({SETTINGS_KEY: {"skipTotals": True, "useDeeplink": True}})
    session, _, store, presenter = build([page([listing])], store, host)
    await session.start()

    outcome = await session.join(listing)

    assert outcome.status is JoinStatus.JOINING
    assert host.opened == [f"roblox://placeId={PLACE_ID}&accessCode=code-7"]
    assert presenter.notices[-1] == ("Joining…", "success")
    assert presenter.last_joined[-1].id == 7
    assert (await store.get(LAST_JOINED_KEY))["id"] == 7


@pytest.mark.asyncio
async def test_join_without_host_reports_error() -> None:
    """Given no host, when joining, then an error notice asks to open the game first."""
    session, _, _, presenter = build([])

    outcome = await session.join(make_listing(7))

    assert outcome.status is JoinStatus.MISSING_HOST_CONTEXT
    assert presenter.notices[-1] == ("Open the game tab first", "error")
    assert presenter.pages == []


@pytest.mark.asyncio
async def test_close_cancels_pending_retry() -> None:
    """Given a pending replay, when closing, then the replay never runs."""
    session, fetcher, _, _ = build([RateLimited()], skipping_store())
    await session.start()

    await session.close()

    assert session.page_scanner.busy is False
    assert fetcher.cursors == [""]


@pytest.mark.asyncio
async def test_last_joined_server_is_listed_first() -> None:
    """Given two servers on the page, when joining the second, then it moves to the front."""
    host = FakeHost()
    first = make_listing(1, owner_id=9, player_ids=[2])
    second = make_listing(2, owner_id=9, player_ids=[3])
    session, _, _, presenter = build([page([first, second])], skipping_store(), host)
    await session.start()
    assert [listing.id for listing, _ in session.visible] == [1, 2]

    await session.join(second)

    assert [listing.id for listing, _ in session.visible] == [2, 1]
    assert presenter.pages[-1][0] == session.visible


@pytest.mark.asyncio
async def test_busy_while_retry_is_pending() -> None:
    """Given a rate-limited first page, when the replay is pending, then the session is busy."""
    session, _, _, _ = build([RateLimited(), page(occupied_listings(1))], skipping_store())

    await session.start()
    assert session.busy is True

    await session.page_scanner.coordinator.wait_for_retry()
    assert session.busy is False
