"""Tests for the desktop join host."""

import webbrowser
from unittest.mock import MagicMock, patch

from private_server_finder.adapters.join import DesktopHost, DesktopHostLocator


def test_open_uri_hands_uri_to_browser() -> None:
    """Given a browser controller, when opening a URI, then the browser receives it."""
    browser = MagicMock()

    DesktopHost(browser).open_uri("roblox://placeId=1&accessCode=x")

    browser.open.assert_called_once_with("roblox://placeId=1&accessCode=x")


def test_invoke_join_launches_deeplink_with_scheme() -> None:
    """Given a custom scheme, when invoking a join, then the matching deep link is opened."""
    browser = MagicMock()

    DesktopHost(browser, deeplink_scheme="test-client").invoke_join(5, "code")

    browser.open.assert_called_once_with("test-client://placeId=5&accessCode=code")


def test_locator_returns_host_when_browser_available() -> None:
    """Given a usable browser, when locating the host, then a desktop host is returned."""
    with patch("webbrowser.get", return_value=MagicMock()):
        host = DesktopHostLocator("roblox").find_host()

    assert isinstance(host, DesktopHost)
    assert host.deeplink_scheme == "roblox"


def test_locator_returns_none_without_browser() -> None:
    """Given no usable browser, when locating the host, then None is returned."""
    with patch("webbrowser.get", side_effect=webbrowser.Error("no browser")):
        assert DesktopHostLocator().find_host() is None
