"""Map information domain model."""

from dataclasses import dataclass

from gw2_presence.domain.models.vector import Rect


@dataclass(frozen=True)
class MapInfo:
    """Static map data needed to place a player on a continent."""

    map_id: int
    map_name: str
    region_id: int
    region_name: str
    continent_id: int
    continent_name: str
    map_rect: Rect
    continent_rect: Rect
    default_floor: int = 1
