"""Nearest point of interest search."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from gw2_presence.application.geometry import distance

if TYPE_CHECKING:
    from gw2_presence.domain.contracts import PointOfInterestCatalogueProtocol
    from gw2_presence.domain.models import PointOfInterest, Vector2D

logger = logging.getLogger(__name__)


def closest_point(
    position: Vector2D, candidates: Iterable[PointOfInterest]
) -> PointOfInterest | None:
    """Return the candidate nearest to ``position``.

    Ties go to the first encountered minimum, so the result only depends on
    the iteration order of ``candidates``.
    """
    best: PointOfInterest | None = None
    best_distance = 0.0
    for candidate in candidates:
        candidate_distance = distance(position, candidate.coord)
        if best is None or candidate_distance < best_distance:
            best = candidate
            best_distance = candidate_distance
    return best


class PointOfInterestIndex:
    """Finds the nearest point of interest of one type on a map."""

    def __init__(
        self,
        catalogue: PointOfInterestCatalogueProtocol,
        poi_type: str | None = "waypoint",
        timeout_seconds: float = 5.0,
    ) -> None:
        """Initialize the index.

        Args:
            catalogue: Source of points of interest per map.
            poi_type: Only consider points of this type, or all if None.
            timeout_seconds: Upper bound for a catalogue lookup.
        """
        self._catalogue = catalogue
        self._poi_type = poi_type
        self._timeout_seconds = timeout_seconds

    async def find_closest(self, position: Vector2D, map_id: int) -> PointOfInterest | None:
        """Find the point of interest nearest to a continent position on a map.

        Returns:
            The nearest match, or None if the catalogue is unavailable or empty.
        """
        try:
            points = await asyncio.wait_for(
                self._catalogue.get_points_of_interest(map_id), timeout=self._timeout_seconds
            )
        except TimeoutError:
            logger.warning(f"Point of interest lookup for map {map_id} timed out")
            return None
        except Exception as e:
            logger.warning(f"Point of interest lookup for map {map_id} failed: {e}")
            return None

        if not points:
            return None
        if self._poi_type is not None:
            points = [p for p in points if p.type == self._poi_type]
        return closest_point(position, points)
