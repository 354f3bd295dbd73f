"""Constants for the private-server listing API."""

DEFAULT_BASE_URL = "https://games.roblox.com"
DEFAULT_PLACE_ID = 109983668079237

# The API rejects larger pages
PAGE_LIMIT = 100
SORT_ORDER = "Desc"
EXCLUDE_FULL_GAMES = "false"

DEFAULT_TIMEOUT_SECONDS = 10.0


def private_servers_url(base_url: str, place_id: int) -> str:
    """Build the listing endpoint URL for a place."""
    return f"{base_url.rstrip('/')}/v1/games/{place_id}/private-servers"
