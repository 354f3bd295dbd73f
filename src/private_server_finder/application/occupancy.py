"""Occupancy classification of server listings.

These functions are the only place occupancy is derived; scanners and the
presentation filters call them instead of inspecting ``players`` or
``player_tokens`` directly.
"""

from private_server_finder.domain.models import ListingFilters, OccupancyInfo, ServerListing


def _owner_id(listing: ServerListing) -> int | str | None:
    return listing.owner.id if listing.owner else None


def has_players(listing: ServerListing) -> bool:
    """Return True if anyone other than the owner is inside the server.

    Non-empty ``player_tokens`` win outright; they carry no identity, so the
    owner cannot be told apart there.
    """
    if listing.player_tokens:
        return True
    owner_id = _owner_id(listing)
    return any(player.id != owner_id for player in listing.players or [])


def owner_inside(listing: ServerListing) -> bool:
    """Return True if the owner appears in the players list."""
    owner_id = _owner_id(listing)
    if owner_id is None or not listing.players:
        return False
    return any(player.id == owner_id for player in listing.players)


def count_excluding_owner(listing: ServerListing) -> int:
    """Count players other than the owner.

    Token counts are returned as-is and may include the owner.
    """
    if listing.player_tokens:
        return len(listing.player_tokens)
    if listing.players is not None:
        owner_id = _owner_id(listing)
        return sum(1 for player in listing.players if player.id != owner_id)
    return 0


def classify(listing: ServerListing) -> OccupancyInfo:
    """Compute all occupancy facts for a listing."""
    return OccupancyInfo(
        has_players=has_players(listing),
        owner_inside=owner_inside(listing),
        player_count=count_excluding_owner(listing),
    )


def select_listings(
    listings: list[ServerListing], filters: ListingFilters
) -> list[tuple[ServerListing, OccupancyInfo]]:
    """Classify listings and keep the ones the user wants to see.

    Listings are always dropped when nobody but the owner is inside. Owner-inside
    listings are kept only with ``show_owner_inside``; ``only_one_player`` keeps
    listings with exactly one non-owner player.

    Args:
        listings: Raw listings of one page, in API order.
        filters: Active listing filters.

    Returns:
        (listing, occupancy) pairs in API order.
    """
    selected: list[tuple[ServerListing, OccupancyInfo]] = []
    for listing in listings:
        info = classify(listing)
        if info.owner_inside and not filters.show_owner_inside:
            continue
        if not info.has_players:
            continue
        if filters.only_one_player and info.player_count != 1:
            continue
        selected.append((listing, info))
    return selected
