"""Interactive console commands for browsing and joining private servers."""

from __future__ import annotations

import argparse
import asyncio
import logging
import shlex
import sys
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any, NoReturn

if TYPE_CHECKING:
    from private_server_finder.application.browser_session import BrowserSession

logger = logging.getLogger(__name__)

HELP_HINT = "Type 'help' for commands."


class CommandError(ValueError):
    """Raised for input that is not a valid command."""


class _CommandParser(argparse.ArgumentParser):
    """Argument parser that reports errors instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise CommandError(message)


def _add_toggle(subparsers: argparse._SubParsersAction, name: str, help_text: str) -> None:
    toggle = subparsers.add_parser(name, help=help_text, add_help=False)
    toggle.add_argument("state", choices=["on", "off"])
    toggle.set_defaults(command=name)


def build_command_parser() -> argparse.ArgumentParser:
    """Build the parser for one interactive command line."""
    parser = _CommandParser(prog="", add_help=False)
    subparsers = parser.add_subparsers(title="commands", metavar="COMMAND")

    for name, aliases, help_text in (
        ("first", ["f"], "Load the first page"),
        ("refresh", ["r"], "Reload the current page"),
        ("next", ["n"], "Load the next page"),
        ("rescan", ["t"], "Rescan totals over all pages"),
        ("skip", ["s"], "Skip the running totals scan"),
        ("help", ["h", "?"], "Show this help"),
        ("quit", ["q", "exit"], "Leave the program"),
    ):
        command = subparsers.add_parser(name, aliases=aliases, help=help_text, add_help=False)
        command.set_defaults(command=name)

    join = subparsers.add_parser("join", aliases=["j"], help="Join server NUMBER", add_help=False)
    join.add_argument("number", type=int)
    join.set_defaults(command="join")

    _add_toggle(subparsers, "owner", "Show servers with the owner inside (on/off)")
    _add_toggle(subparsers, "one", "Only show servers with exactly one player (on/off)")
    _add_toggle(subparsers, "deeplink", "Join through a deep link (on/off)")
    _add_toggle(subparsers, "skiptotals", "Skip the totals scan on startup (on/off)")
    return parser


def parse_command(parser: argparse.ArgumentParser, line: str) -> argparse.Namespace | None:
    """Parse one input line.

    Returns:
        The parsed command, or None for a blank line.

    Raises:
        CommandError: If the line is not a valid command.
    """
    try:
        words = shlex.split(line)
    except ValueError as e:
        raise CommandError(str(e)) from e
    if not words:
        return None
    args = parser.parse_args(words)
    if getattr(args, "command", None) is None:
        raise CommandError(f"unknown command: {words[0]}")
    return args


# Commands that start a request and are refused while one is running
_REQUEST_COMMANDS = {"first", "refresh", "next", "rescan", "owner", "one"}


class CommandLoop:
    """Reads command lines and drives a browsing session."""

    def __init__(self, session: BrowserSession) -> None:
        """Initialize the loop.

        Args:
            session: The session commands act on.
        """
        self.session = session
        self.parser = build_command_parser()
        self._tasks: set[asyncio.Task[Any]] = set()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run a long operation in the background so commands keep being read."""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def shutdown(self) -> None:
        """Stop the session and cancel background operations."""
        await self.session.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def execute(self, line: str) -> bool:
        """Execute one command line.

        Returns:
            False when the user asked to quit, True otherwise.
        """
        presenter = self.session.presenter
        try:
            args = parse_command(self.parser, line)
        except CommandError as e:
            presenter.notify(f"{e}. {HELP_HINT}", "error")
            return True
        if args is None:
            return True

        command = args.command
        if command == "quit":
            return False
        if command == "help":
            presenter.notify(self.parser.format_help(), "info")
            return True
        if command in _REQUEST_COMMANDS and self.session.busy:
            presenter.notify("Busy, wait for the current operation to finish", "warn")
            return True

        await self._dispatch(args)
        return True

    async def _dispatch(self, args: argparse.Namespace) -> None:
        session = self.session
        command = args.command
        enabled = getattr(args, "state", None) == "on"

        if command == "first":
            await session.first_page()
        elif command == "refresh":
            await session.refresh()
        elif command == "next":
            await session.next_page()
        elif command == "rescan":
            self.spawn(session.rescan_totals())
        elif command == "skip":
            if session.totals_scanner.running:
                session.skip_totals_scan()
            else:
                session.presenter.notify("No totals scan is running", "info")
        elif command == "join":
            await self._join(args.number)
        elif command == "owner":
            await session.set_show_owner_inside(enabled)
        elif command == "one":
            await session.set_only_one_player(enabled)
        elif command == "deeplink":
            await session.set_use_deeplink(enabled)
        elif command == "skiptotals":
            await session.set_skip_totals(enabled)

    async def _join(self, number: int) -> None:
        visible = self.session.visible
        if not 1 <= number <= len(visible):
            self.session.presenter.notify(f"No server #{number} on this page", "error")
            return
        listing, _ = visible[number - 1]
        await self.session.join(listing)

    async def run(self, read_line: Callable[[], Awaitable[str]]) -> None:
        """Execute lines until the user quits or input ends.

        Args:
            read_line: Returns the next input line; an empty string means end of input.
        """
        self.session.presenter.notify(HELP_HINT, "info")
        while True:
            line = await read_line()
            if not line:
                logger.debug("End of input")
                return
            if not await self.execute(line):
                return


async def read_stdin_line() -> str:
    """Read one line from stdin without blocking the event loop."""
    return await asyncio.to_thread(sys.stdin.readline)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the program's command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Browse, filter and join occupied private servers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use settings from the environment / .env
  private-server-finder

  # Override the place and read a TOML config file
  private-server-finder --place-id 109983668079237 --config-file finder.toml
        """,
    )
    parser.add_argument("--config-file", help="TOML file with [scanner] and [join] settings")
    parser.add_argument("--place-id", type=int, help="Game place whose servers are listed")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug messages to stderr"
    )
    return parser
