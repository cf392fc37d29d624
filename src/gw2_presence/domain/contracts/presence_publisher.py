"""Protocols connecting the tracker with the synchronization layer."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gw2_presence.domain.models.presence_record import PresenceRecord


class PresencePublisherProtocol(Protocol):
    """Protocol for transmitting the local presence record to peers."""

    async def publish(self, record: "PresenceRecord") -> None:
        """Send a snapshot of the local record to all peers."""
        ...


class PresenceSourceProtocol(Protocol):
    """Protocol for reading the local presence record."""

    def current_record(self) -> "PresenceRecord":
        """Return a snapshot of the current local record."""
        ...

    def request_update(self) -> None:
        """Transmit the current record on the next tick."""
        ...
