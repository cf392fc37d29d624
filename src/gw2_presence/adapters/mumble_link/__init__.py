"""MumbleLink feed adapters."""

from gw2_presence.adapters.mumble_link.mumble_link_reader import MumbleLinkReader

__all__ = ["MumbleLinkReader"]
