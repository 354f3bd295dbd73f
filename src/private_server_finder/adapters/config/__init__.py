"""Configuration adapters."""

from private_server_finder.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
