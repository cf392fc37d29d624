"""Point of interest domain model."""

from dataclasses import dataclass

from gw2_presence.domain.models.vector import Vector2D


@dataclass(frozen=True)
class PointOfInterest:
    """A named location on a map, in continent coordinates."""

    poi_id: int
    name: str
    coord: Vector2D
    type: str = "waypoint"
    floor: int = 0

    @property
    def display_name(self) -> str:
        """Name to show, synthesized when the catalogue has none."""
        return self.name or f"Waypoint {self.poi_id}"
