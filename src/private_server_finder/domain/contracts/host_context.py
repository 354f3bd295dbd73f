"""Protocols for the join-dispatch collaborator."""

from typing import Protocol


class HostContextProtocol(Protocol):
    """A running host able to start a game session."""

    def open_uri(self, uri: str) -> None:
        """Navigate the host to a deep-link URI."""
        ...

    def invoke_join(self, place_id: int, access_code: str) -> None:
        """Ask the host to run its native private-server join routine."""
        ...


class HostLocatorProtocol(Protocol):
    """Finds the host context, if one is available."""

    def find_host(self) -> HostContextProtocol | None:
        """Return the host context, or None when no host is running."""
        ...
