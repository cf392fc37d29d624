"""Peer command domain model."""

from dataclasses import dataclass
from enum import StrEnum


class CommandKind(StrEnum):
    """Kinds of commands exchanged between peers."""

    PRESENCE_UPDATE = "PRESENCE_UPDATE"
    PRESENCE_REQUEST = "PRESENCE_REQUEST"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class PeerCommand:
    """A parsed inbound command."""

    kind: CommandKind
    parameters: tuple[str, ...] = ()
