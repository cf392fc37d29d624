"""Peer transport that only logs, for running the tracker without a voice host."""

import logging

from gw2_presence.domain.contracts.display_refresher import DisplayRefresherProtocol
from gw2_presence.domain.contracts.peer_transport import PeerTransportProtocol

logger = logging.getLogger(__name__)


class LoggingPeerTransport(PeerTransportProtocol, DisplayRefresherProtocol):
    """Logs outgoing commands and display refresh requests."""

    def __init__(self) -> None:
        self.sent: list[tuple[int, str, int | None]] = []

    async def send_to_peers(
        self, session_id: int, payload: str, target_participant_id: int | None = None
    ) -> None:
        """Log a command instead of sending it."""
        target = "all" if target_participant_id is None else f"participant {target_participant_id}"
        logger.info(f"[session {session_id} -> {target}] {payload}")
        self.sent.append((session_id, payload, target_participant_id))

    def request_display_refresh(self, session_id: int, participant_id: int) -> None:
        """Log a display refresh request."""
        logger.info(f"Display refresh requested for participant {participant_id} on {session_id}")
