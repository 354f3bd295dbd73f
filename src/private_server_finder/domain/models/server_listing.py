"""Server listing domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServerOwner(BaseModel):
    """Owner of a private server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    name: str | None = None


class ServerPlayer(BaseModel):
    """A player currently inside a private server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    name: str | None = None


class ServerListing(BaseModel):
    """One private-server record as returned by the listing API.

    Either ``players`` or ``player_tokens`` may be missing from the payload,
    in which case the field is ``None`` rather than an empty list.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int | str
    name: str | None = None
    access_code: str | None = Field(default=None, alias="accessCode")
    owner: ServerOwner | None = None
    players: list[ServerPlayer] | None = None
    player_tokens: list[str] | None = Field(default=None, alias="playerTokens")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServerListing":
        """Build a listing from a raw API record."""
        return cls.model_validate(data)

    @property
    def display_name(self) -> str:
        """Server name, or a placeholder for unnamed servers."""
        return self.name or "Unnamed Server"

    @property
    def owner_name(self) -> str:
        """Owner name, or a placeholder when unknown."""
        if self.owner and self.owner.name:
            return self.owner.name
        return "Unknown"
