"""Display text formatters."""

from gw2_presence.adapters.formatters.presence_formatter import PresenceFormatter

__all__ = ["PresenceFormatter"]
