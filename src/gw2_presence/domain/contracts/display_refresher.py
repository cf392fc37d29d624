"""Protocol for display refresh requests."""

from typing import Protocol


class DisplayRefresherProtocol(Protocol):
    """Protocol for asking the host to redraw a participant's info."""

    def request_display_refresh(self, session_id: int, participant_id: int) -> None:
        """Request that the host re-render the given participant."""
        ...
