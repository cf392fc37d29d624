"""Protocol for sending commands to peers."""

from typing import Protocol


class PeerTransportProtocol(Protocol):
    """Protocol for the host's "send to peers" primitive."""

    async def send_to_peers(
        self, session_id: int, payload: str, target_participant_id: int | None = None
    ) -> None:
        """Send an opaque command string to peers of a session.

        Args:
            session_id: The session (server connection) to send on.
            payload: The encoded command.
            target_participant_id: Send to this participant only, or to everyone if None.
        """
        ...
