"""Protocols the application layer depends on."""

from private_server_finder.domain.contracts.host_context import (
    HostContextProtocol,
    HostLocatorProtocol,
)
from private_server_finder.domain.contracts.key_value_store import KeyValueStoreProtocol
from private_server_finder.domain.contracts.page_fetcher import PageFetcherProtocol
from private_server_finder.domain.contracts.page_scan_listener import PageScanListenerProtocol
from private_server_finder.domain.contracts.presenter import PresenterProtocol

__all__ = [
    "HostContextProtocol",
    "HostLocatorProtocol",
    "KeyValueStoreProtocol",
    "PageFetcherProtocol",
    "PageScanListenerProtocol",
    "PresenterProtocol",
]
