"""Persisted totals snapshot domain model."""

from pydantic import BaseModel, ConfigDict, Field

from private_server_finder.domain.models.pagination_state import AggregateTotals


class TotalsSnapshot(BaseModel):
    """Aggregate counts produced by a completed totals walk.

    Timestamps are milliseconds since the epoch. Field aliases match the
    stored ``totalsCache`` record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(alias="ts")
    total_servers: int = Field(alias="totalServers")
    servers_with_players: int = Field(alias="serversWithPlayers")
    # Records written before this counter existed lack the key
    servers_with_players_no_owner: int = Field(default=0, alias="serversWithPlayersNoOwner")
    max_pages: int = Field(alias="maxPages")

    @classmethod
    def from_totals(cls, totals: AggregateTotals, max_pages: int, timestamp: int) -> "TotalsSnapshot":
        """Freeze running totals into a snapshot."""
        return cls(
            timestamp=timestamp,
            total_servers=totals.total_servers,
            servers_with_players=totals.servers_with_players,
            servers_with_players_no_owner=totals.servers_with_players_no_owner,
            max_pages=max_pages,
        )

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        """Return True if the snapshot is no older than the TTL."""
        return now_ms - self.timestamp <= ttl_ms

    def to_record(self) -> dict[str, int]:
        """Serialize to the stored record shape."""
        return self.model_dump(by_alias=True)

    def apply_to(self, totals: AggregateTotals) -> None:
        """Copy the snapshot counts into running totals."""
        totals.total_servers = self.total_servers
        totals.servers_with_players = self.servers_with_players
        totals.servers_with_players_no_owner = self.servers_with_players_no_owner
