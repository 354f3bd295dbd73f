"""Main entry point for the private server finder."""

import asyncio
import logging
import sys

import aiohttp
from pydantic import ValidationError

from private_server_finder.adapters.config import AppConfig
from private_server_finder.adapters.console import ConsolePresenter
from private_server_finder.adapters.join import DesktopHostLocator
from private_server_finder.adapters.listing_api import HttpPageFetcher
from private_server_finder.adapters.storage import JsonFileStore
from private_server_finder.application.browser_session import BrowserSession
from private_server_finder.application.join_service import JoinService
from private_server_finder.application.page_scanner import PageScanner
from private_server_finder.application.rate_limit_coordinator import RateLimitCoordinator
from private_server_finder.application.settings_service import SettingsService
from private_server_finder.application.totals_cache import TotalsCache
from private_server_finder.application.totals_scanner import TotalsScanner
from private_server_finder.cli import CommandLoop, build_arg_parser, read_stdin_line
from private_server_finder.domain.models import BrowserState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def build_session(config: AppConfig, http_session: aiohttp.ClientSession) -> BrowserSession:
    """Wire adapters and services into a browsing session."""
    store = JsonFileStore(config.storage_path)
    presenter = ConsolePresenter()
    fetcher = HttpPageFetcher(
        http_session,
        config.place_id,
        base_url=config.listing_api_base_url,
        page_limit=config.page_limit,
        sort_order=config.sort_order,
        timeout_seconds=config.request_timeout_seconds,
        auth_cookie=config.auth_cookie,
    )
    state = BrowserState()
    totals_cache = TotalsCache(store, ttl_ms=config.totals_cache_ttl_ms)

    return BrowserSession(
        state=state,
        page_scanner=PageScanner(
            fetcher, state, coordinator=RateLimitCoordinator(config.rate_limit_delay_seconds)
        ),
        totals_scanner=TotalsScanner(
            fetcher,
            totals_cache,
            presenter,
            rate_limit_delay_seconds=config.rate_limit_delay_seconds,
        ),
        totals_cache=totals_cache,
        settings_service=SettingsService(store),
        join_service=JoinService(
            store,
            DesktopHostLocator(config.deeplink_scheme),
            config.place_id,
            deeplink_scheme=config.deeplink_scheme,
        ),
        presenter=presenter,
    )


async def main(argv: list[str] | None = None) -> None:
    """Main application entry point: run the startup sequence, then read commands."""
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = AppConfig()
        if args.config_file:
            config.config_file = args.config_file
        config.load_toml_overrides()
        if args.place_id is not None:
            config.place_id = args.place_id
    except (ValidationError, ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info(f"Listing private servers for place {config.place_id}")

    async with aiohttp.ClientSession() as http_session:
        session = build_session(config, http_session)
        commands = CommandLoop(session)
        # Startup runs in the background so "skip" can abort its totals scan
        commands.spawn(session.start())
        try:
            await commands.run(read_stdin_line)
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            await commands.shutdown()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
