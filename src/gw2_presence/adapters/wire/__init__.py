"""Wire protocol adapters."""

from gw2_presence.adapters.wire.presence_codec import PresenceCodec

__all__ = ["PresenceCodec"]
