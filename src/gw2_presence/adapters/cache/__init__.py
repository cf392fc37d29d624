"""Cache adapters."""

from gw2_presence.adapters.cache.peer_presence_cache import PeerPresenceCache

__all__ = ["PeerPresenceCache"]
