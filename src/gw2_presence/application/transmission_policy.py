"""Policy deciding when presence changes are worth transmitting."""

import math
from dataclasses import dataclass


def elapsed(now: float, since: float | None) -> float:
    """Seconds from ``since`` to ``now``; infinite if ``since`` never happened."""
    if since is None:
        return math.inf
    return now - since


@dataclass(frozen=True)
class TransmissionPolicy:
    """Debounce window and transmission thresholds.

    The feed updates every frame, but peers only need to hear about changes
    that matter: entering or leaving the game, a new map or character, or a
    noticeable move.
    """

    online_debounce_seconds: float = 5.0
    location_threshold_seconds: float = 5.0
    distance_threshold: float = 20.0

    def should_link(self, now: float, offline_since: float | None) -> bool:
        """Whether an online signal has outlasted the last offline period."""
        return elapsed(now, offline_since) >= self.online_debounce_seconds

    def should_unlink(self, now: float, offline_since: float | None) -> bool:
        """Whether an offline signal has held long enough to go offline."""
        if offline_since is None:
            return False
        return elapsed(now, offline_since) >= self.online_debounce_seconds

    def identity_due(self, now: float, last_transmission: float | None) -> bool:
        """Whether an identity change may be transmitted now."""
        return elapsed(now, last_transmission) >= self.location_threshold_seconds

    def position_due(
        self, now: float, last_transmission: float | None, displacement: float
    ) -> bool:
        """Whether a position change may be transmitted now."""
        return (
            self.identity_due(now, last_transmission) and displacement >= self.distance_threshold
        )
