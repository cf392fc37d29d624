"""Configuration adapters."""

from gw2_presence.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
