"""Console presentation adapter."""

from private_server_finder.adapters.console.console_presenter import ConsolePresenter

__all__ = ["ConsolePresenter"]
