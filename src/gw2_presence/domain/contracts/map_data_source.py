"""Protocols for static map data lookups."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gw2_presence.domain.models.map_info import MapInfo
    from gw2_presence.domain.models.point_of_interest import PointOfInterest


class MapDataSourceProtocol(Protocol):
    """Protocol for looking up map information by map ID."""

    async def get_map(self, map_id: int) -> "MapInfo | None":
        """Get information about a map.

        Args:
            map_id: The map ID reported by the feed.

        Returns:
            The map information, or None if unavailable.
        """
        ...


class WorldNameSourceProtocol(Protocol):
    """Protocol for looking up world (server) names."""

    async def get_world_names(self) -> dict[int, str]:
        """Get all known world names.

        Returns:
            Mapping of world ID to world name, empty if unavailable.
        """
        ...


class PointOfInterestCatalogueProtocol(Protocol):
    """Protocol for listing the points of interest on a map.

    The returned order is the catalogue order and decides ties in
    nearest-point searches.
    """

    async def get_points_of_interest(self, map_id: int) -> "list[PointOfInterest] | None":
        """Get the points of interest on a map.

        Args:
            map_id: The map ID.

        Returns:
            Points of interest in catalogue order, or None if unavailable.
        """
        ...
