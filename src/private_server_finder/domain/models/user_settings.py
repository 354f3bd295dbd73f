"""Persisted user preference models."""

from pydantic import BaseModel, ConfigDict, Field

from private_server_finder.domain.models.occupancy import ListingFilters


class UserSettings(BaseModel):
    """User preferences stored under the ``settings`` key."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    skip_totals: bool = Field(default=False, alias="skipTotals")
    show_owner_inside: bool = Field(default=False, alias="showOwnerInside")
    only_one_player: bool = Field(default=False, alias="onlyOnePlayer")
    use_deeplink: bool = Field(default=False, alias="useDeeplink")

    @property
    def filters(self) -> ListingFilters:
        """Listing filters selected by these settings."""
        return ListingFilters(
            show_owner_inside=self.show_owner_inside,
            only_one_player=self.only_one_player,
        )


class LastJoinedServer(BaseModel):
    """The server most recently joined, stored under ``lastJoinedServer``."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    ts: int

    def time_ago(self, now_ms: int) -> str:
        """Describe how long ago the server was joined, e.g. "5m ago"."""
        diff = max(0, (now_ms - self.ts) // 1000)
        if diff < 60:
            return f"{diff}s ago"
        if diff < 3600:
            return f"{diff // 60}m ago"
        return f"{diff // 3600}h ago"
