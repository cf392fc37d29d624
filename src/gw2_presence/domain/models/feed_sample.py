"""Feed sample domain model."""

from dataclasses import dataclass, field

from gw2_presence.domain.models.mumble_identity import MumbleIdentity
from gw2_presence.domain.models.vector import Vector3D


@dataclass(frozen=True)
class FeedSample:
    """One poll tick's snapshot of the shared-memory feed."""

    is_active: bool = False
    is_this_application: bool = False
    identity: MumbleIdentity = field(default_factory=MumbleIdentity)
    avatar_position: Vector3D = field(default_factory=Vector3D)

    @property
    def is_online(self) -> bool:
        """Whether the game is running and updating the feed."""
        return self.is_active and self.is_this_application
