"""GW2 presence: share your Guild Wars 2 location with voice chat peers."""

__version__ = "0.1.0"
