"""MumbleLink identity domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MumbleIdentity:
    """Identity fields published by the game through MumbleLink."""

    name: str = ""
    profession: int = 0
    map_id: int = 0
    world_id: int = 0
    team_color_id: int = 0
    commander: bool = False
