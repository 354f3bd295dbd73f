"""Occupancy classification and listing filter models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OccupancyInfo:
    """Derived occupancy facts for one listing."""

    has_players: bool
    owner_inside: bool
    player_count: int


@dataclass(frozen=True)
class ListingFilters:
    """User-toggleable listing filters."""

    show_owner_inside: bool = False
    only_one_player: bool = False
