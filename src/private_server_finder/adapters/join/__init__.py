"""Join dispatch adapters."""

from private_server_finder.adapters.join.desktop_host import DesktopHost, DesktopHostLocator

__all__ = ["DesktopHost", "DesktopHostLocator"]
