"""Private-server listing API adapter."""

from private_server_finder.adapters.listing_api.http_page_fetcher import HttpPageFetcher

__all__ = ["HttpPageFetcher"]
