"""Protocol for caching peers' presence records."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gw2_presence.domain.models.presence_record import PresenceRecord, RemotePresenceRecord


class PresenceCacheProtocol(Protocol):
    """Protocol for storing presence records by session and participant."""

    def upsert(
        self, session_id: int, participant_id: int, record: "PresenceRecord"
    ) -> "RemotePresenceRecord":
        """Insert or replace the record of a participant."""
        ...

    def remove(self, session_id: int, participant_id: int) -> bool:
        """Remove one participant's record. Returns whether it was present."""
        ...

    def remove_all(self, session_id: int) -> int:
        """Remove every record of a session. Returns the number removed."""
        ...

    def get(self, session_id: int, participant_id: int) -> "RemotePresenceRecord | None":
        """Get one participant's record, or None if absent."""
        ...
