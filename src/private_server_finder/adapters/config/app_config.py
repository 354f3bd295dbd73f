"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from private_server_finder.adapters.listing_api.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_PLACE_ID,
    DEFAULT_TIMEOUT_SECONDS,
    PAGE_LIMIT,
    SORT_ORDER,
)

# TOML [scanner] / [join] keys that may override environment settings
_SCANNER_KEYS = (
    "place_id",
    "listing_api_base_url",
    "page_limit",
    "sort_order",
    "request_timeout_seconds",
    "rate_limit_delay_seconds",
    "totals_cache_ttl_seconds",
    "storage_path",
)
_JOIN_KEYS = ("deeplink_scheme",)


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Listing API
    place_id: int = Field(
        default=DEFAULT_PLACE_ID, description="Game place whose private servers are listed"
    )
    listing_api_base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL of the private-server listing API"
    )
    page_limit: int = Field(default=PAGE_LIMIT, description="Listings requested per page")
    sort_order: str = Field(default=SORT_ORDER, description="Listing sort order: 'Desc' or 'Asc'")
    request_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, description="Timeout for listing API requests in seconds"
    )
    auth_cookie: str | None = Field(
        default=None, description="Cookie header sent with listing requests (user session)"
    )

    # Scanning
    rate_limit_delay_seconds: float = Field(
        default=5.0, description="Fixed wait before retrying after HTTP 429"
    )
    totals_cache_ttl_seconds: int = Field(
        default=600, description="Maximum age of the cached totals snapshot in seconds"
    )

    # Persistence
    storage_path: str = Field(
        default="private_server_finder.json",
        description="JSON file holding settings, totals cache and last joined server",
    )

    # Joining
    deeplink_scheme: str = Field(default="roblox", description="URI scheme of join deep links")

    config_file: str | None = Field(
        default=None, description="Optional TOML file overriding [scanner] and [join] settings"
    )

    @field_validator("page_limit")
    @classmethod
    def validate_page_limit(cls, v: int) -> int:
        """Validate the page size is accepted by the API."""
        if not 1 <= v <= PAGE_LIMIT:
            raise ValueError(f"page_limit must be between 1 and {PAGE_LIMIT}")
        return v

    @field_validator("sort_order")
    @classmethod
    def validate_sort_order(cls, v: str) -> str:
        """Validate and normalize the sort order to 'Asc' or 'Desc'."""
        normalized = v.capitalize()
        if normalized not in ("Asc", "Desc"):
            raise ValueError("sort_order must be either 'Asc' or 'Desc'")
        return normalized

    @field_validator("rate_limit_delay_seconds", "request_timeout_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate delays and timeouts are not negative."""
        if v < 0:
            raise ValueError("delays and timeouts must not be negative")
        return v

    @property
    def totals_cache_ttl_ms(self) -> int:
        """Totals cache TTL in milliseconds."""
        return self.totals_cache_ttl_seconds * 1000

    def load_toml_overrides(self) -> dict[str, Any]:
        """Apply [scanner] and [join] settings from the TOML config file.

        Returns:
            The parsed TOML data, or an empty dict when no file is configured.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        scanner = toml_data.get("scanner", {})
        for key in _SCANNER_KEYS:
            if key in scanner:
                setattr(self, key, scanner[key])

        join = toml_data.get("join", {})
        for key in _JOIN_KEYS:
            if key in join:
                setattr(self, key, join[key])

        return toml_data
