"""Presence record domain models."""

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from gw2_presence.domain.models.vector import Vector2D


class PresenceRecord(BaseModel):
    """What a participant is currently doing in the game.

    This is the unit of synchronization between peers. Field aliases are the
    compact identifiers used on the wire; positions travel as ``[x, y]``.
    An all-default record means "not in game".
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    character_name: str = Field(default="", alias="cn")
    profession: int = Field(default=0, alias="pr")
    map_id: int = Field(default=0, alias="mi")
    map_name: str = Field(default="", alias="mn")
    region_id: int = Field(default=0, alias="ri")
    region_name: str = Field(default="", alias="rn")
    continent_id: int = Field(default=0, alias="ci")
    continent_name: str = Field(default="", alias="cnn")
    world_id: int = Field(default=0, alias="wi")
    world_name: str = Field(default="", alias="wn")
    team_color_id: int = Field(default=0, alias="tc")
    commander: bool = Field(default=False, alias="cm")
    character_continent_position: Vector2D = Field(default_factory=Vector2D, alias="cp")
    waypoint_id: int = Field(default=0, alias="wpi")
    waypoint_name: str = Field(default="", alias="wpn")
    waypoint_continent_position: Vector2D = Field(default_factory=Vector2D, alias="wpp")

    @field_validator("character_continent_position", "waypoint_continent_position", mode="before")
    @classmethod
    def parse_position(cls, v: Any) -> Any:
        """Accept ``[x, y]`` pairs as positions."""
        if isinstance(v, list | tuple):
            if len(v) != 2:
                raise ValueError("position must have exactly two coordinates")
            if not all(isinstance(c, int | float) and not isinstance(c, bool) for c in v):
                raise ValueError("position coordinates must be numbers")
            try:
                return Vector2D(float(v[0]), float(v[1]))
            except OverflowError as e:
                raise ValueError("position coordinates are out of range") from e
        return v

    @field_validator("character_continent_position", "waypoint_continent_position")
    @classmethod
    def check_finite(cls, v: Vector2D) -> Vector2D:
        """Reject infinite and NaN coordinates, which JSON cannot carry."""
        if not (math.isfinite(v.x) and math.isfinite(v.y)):
            raise ValueError("position coordinates must be finite")
        return v

    @field_serializer("character_continent_position", "waypoint_continent_position")
    def serialize_position(self, position: Vector2D) -> list[float]:
        return [position.x, position.y]

    @property
    def is_empty(self) -> bool:
        """Whether this record represents a participant that is not in game."""
        return self == PresenceRecord()

    def clear(self) -> None:
        """Reset every field to its offline default."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))

    def snapshot(self) -> "PresenceRecord":
        """Return an independent copy for transmission."""
        return self.model_copy(deep=True)


@dataclass(frozen=True)
class RemotePresenceRecord:
    """A presence record received from a peer."""

    session_id: int
    participant_id: int
    record: PresenceRecord
    received_at: float
