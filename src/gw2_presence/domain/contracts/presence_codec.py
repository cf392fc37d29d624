"""Protocol for the peer command wire codec."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gw2_presence.domain.models.peer_command import PeerCommand
    from gw2_presence.domain.models.presence_record import PresenceRecord


class PresenceCodecProtocol(Protocol):
    """Protocol for encoding and decoding peer commands.

    Decoding methods raise MalformedCommandError on invalid input.
    """

    def parse_command(self, text: str) -> "PeerCommand":
        """Split a command string into its kind and parameters."""
        ...

    def decode_update(self, command: "PeerCommand") -> "tuple[int, PresenceRecord]":
        """Extract the sender and record from a presence update."""
        ...

    def decode_request(self, command: "PeerCommand") -> int:
        """Extract the requesting participant from a presence request."""
        ...

    def encode_update(self, participant_id: int, record: "PresenceRecord") -> str:
        """Build a presence update command sent by ``participant_id``."""
        ...

    def encode_request(self, participant_id: int) -> str:
        """Build a presence request command sent by ``participant_id``."""
        ...
