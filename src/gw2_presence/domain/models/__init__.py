"""Domain models for GW2 presence."""

from gw2_presence.domain.models.feed_sample import FeedSample
from gw2_presence.domain.models.map_info import MapInfo
from gw2_presence.domain.models.mumble_identity import MumbleIdentity
from gw2_presence.domain.models.peer_command import CommandKind, PeerCommand
from gw2_presence.domain.models.point_of_interest import PointOfInterest
from gw2_presence.domain.models.presence_record import PresenceRecord, RemotePresenceRecord
from gw2_presence.domain.models.vector import Rect, Vector2D, Vector3D

__all__ = [
    "CommandKind",
    "FeedSample",
    "MapInfo",
    "MumbleIdentity",
    "PeerCommand",
    "PointOfInterest",
    "PresenceRecord",
    "Rect",
    "RemotePresenceRecord",
    "Vector2D",
    "Vector3D",
]
