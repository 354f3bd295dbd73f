"""Desktop host that launches the game client through its URI scheme."""

import logging
import webbrowser

from private_server_finder.domain.contracts.host_context import (
    HostContextProtocol,
    HostLocatorProtocol,
)

logger = logging.getLogger(__name__)


class DesktopHost(HostContextProtocol):
    """Hands launch URIs to the desktop's registered protocol handler."""

    def __init__(self, browser: webbrowser.BaseBrowser, deeplink_scheme: str = "roblox") -> None:
        """Initialize with the browser controller used to open URIs."""
        self._browser = browser
        self.deeplink_scheme = deeplink_scheme

    def open_uri(self, uri: str) -> None:
        """Open a deep-link URI."""
        logger.debug(f"Opening {uri}")
        if not self._browser.open(uri):
            logger.warning(f"No handler accepted {uri}")

    def invoke_join(self, place_id: int, access_code: str) -> None:
        """Run the client's join routine.

        On the desktop the client's join routine is its registered URI
        handler, so this launches the same deep link.
        """
        self.open_uri(f"{self.deeplink_scheme}://placeId={place_id}&accessCode={access_code}")


class DesktopHostLocator(HostLocatorProtocol):
    """Finds a usable browser controller to act as the host."""

    def __init__(self, deeplink_scheme: str = "roblox") -> None:
        """Initialize the locator."""
        self.deeplink_scheme = deeplink_scheme

    def find_host(self) -> DesktopHost | None:
        """Return a desktop host, or None if no browser can be launched."""
        try:
            browser = webbrowser.get()
        except webbrowser.Error as e:
            logger.warning(f"No browser available to launch the game: {e}")
            return None
        return DesktopHost(browser, self.deeplink_scheme)
