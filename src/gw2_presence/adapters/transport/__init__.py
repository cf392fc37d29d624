"""Peer transport adapters."""

from gw2_presence.adapters.transport.logging_transport import LoggingPeerTransport

__all__ = ["LoggingPeerTransport"]
