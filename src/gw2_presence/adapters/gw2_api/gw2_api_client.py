"""Client for the public Guild Wars 2 API.

Provides map information, world names and points of interest. Static game
data rarely changes, so successful responses are cached for the lifetime of
the client; failures are not cached and are retried on the next lookup.

API Documentation: https://wiki.guildwars2.com/wiki/API:Main
"""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from gw2_presence.adapters.api_rate_limiter import ApiRateLimiter
from gw2_presence.adapters.api_request_logger import log_api_request
from gw2_presence.domain.contracts.map_data_source import (
    MapDataSourceProtocol,
    PointOfInterestCatalogueProtocol,
    WorldNameSourceProtocol,
)
from gw2_presence.domain.models import MapInfo, PointOfInterest, Rect, Vector2D

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.guildwars2.com"


def _parse_rect(value: Any) -> Rect:
    (x0, y0), (x1, y1) = value
    return Rect(Vector2D(float(x0), float(y0)), Vector2D(float(x1), float(y1)))


def parse_map(data: Any) -> MapInfo | None:
    """Parse a /v2/maps/{id} response."""
    try:
        return MapInfo(
            map_id=int(data["id"]),
            map_name=str(data["name"]),
            region_id=int(data.get("region_id", 0)),
            region_name=str(data.get("region_name", "")),
            continent_id=int(data.get("continent_id", 0)),
            continent_name=str(data.get("continent_name", "")),
            map_rect=_parse_rect(data["map_rect"]),
            continent_rect=_parse_rect(data["continent_rect"]),
            default_floor=int(data.get("default_floor", 1)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Unexpected map data from GW2 API: {e}")
        return None


def parse_world_names(data: Any) -> dict[int, str]:
    """Parse a /v2/worlds?ids=all response into ID -> name."""
    if not isinstance(data, list):
        return {}
    names: dict[int, str] = {}
    for world in data:
        if not isinstance(world, dict):
            continue
        try:
            names[int(world["id"])] = str(world["name"])
        except (KeyError, TypeError, ValueError):
            continue
    return names


def parse_points_of_interest(data: Any) -> list[PointOfInterest]:
    """Parse the points of interest of a continent map response.

    The API returns them as an object keyed by ID; response order is kept.
    """
    if not isinstance(data, dict):
        return []
    raw_points = data.get("points_of_interest", {})
    if isinstance(raw_points, dict):
        raw_points = list(raw_points.values())
    if not isinstance(raw_points, list):
        return []

    points: list[PointOfInterest] = []
    for poi in raw_points:
        if not isinstance(poi, dict):
            continue
        try:
            x, y = poi["coord"]
            points.append(
                PointOfInterest(
                    poi_id=int(poi["id"]),
                    name=str(poi.get("name", "")),
                    coord=Vector2D(float(x), float(y)),
                    type=str(poi.get("type", "")),
                    floor=int(poi.get("floor", 0)),
                )
            )
        except (KeyError, TypeError, ValueError):
            continue
    return points


class Gw2ApiClient(MapDataSourceProtocol, WorldNameSourceProtocol, PointOfInterestCatalogueProtocol):
    """Looks up static game data from the GW2 API using aiohttp."""

    def __init__(
        self,
        session: "ClientSession | None" = None,
        base_url: str = DEFAULT_BASE_URL,
        language: str = "en",
        timeout_seconds: float = 10,
        min_delay_seconds: float = 0.1,
    ) -> None:
        """Initialize with an optional aiohttp session.

        Without a session every lookup reports the data as unavailable.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._language = language
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = ApiRateLimiter.get_instance("gw2_api", min_delay_seconds)
        self._maps: dict[int, MapInfo] = {}
        self._world_names: dict[int, str] = {}
        self._points_of_interest: dict[int, list[PointOfInterest]] = {}

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a JSON document, returning None on any failure."""
        if not self._session:
            return None

        url = f"{self._base_url}{path}"
        query = {"lang": self._language, **(params or {})}
        log_api_request("GET", url, query)
        try:
            async with self._rate_limiter:
                async with self._session.get(url, params=query, timeout=self._timeout) as response:
                    if response.status != 200:
                        response_text = await response.text()
                        logger.warning(
                            f"GW2 API returned status {response.status} for {path}: "
                            f"{response_text[:200]}"
                        )
                        return None
                    return await response.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            logger.warning(f"Error requesting GW2 API {path}: {e}")
            return None

    async def get_map(self, map_id: int) -> MapInfo | None:
        """Get information about a map."""
        if map_id in self._maps:
            return self._maps[map_id]
        if map_id <= 0:
            return None

        map_info = parse_map(await self._get_json(f"/v2/maps/{map_id}"))
        if map_info is not None:
            self._maps[map_id] = map_info
        return map_info

    async def get_world_names(self) -> dict[int, str]:
        """Get the names of all worlds."""
        if not self._world_names:
            self._world_names = parse_world_names(
                await self._get_json("/v2/worlds", {"ids": "all"})
            )
        return dict(self._world_names)

    async def get_points_of_interest(self, map_id: int) -> list[PointOfInterest] | None:
        """Get the points of interest on a map, in API order."""
        if map_id in self._points_of_interest:
            return self._points_of_interest[map_id]

        map_info = await self.get_map(map_id)
        if map_info is None:
            return None

        data = await self._get_json(
            f"/v2/continents/{map_info.continent_id}/floors/{map_info.default_floor}"
            f"/regions/{map_info.region_id}/maps/{map_id}"
        )
        if data is None:
            return None
        points = parse_points_of_interest(data)
        self._points_of_interest[map_id] = points
        logger.debug(f"Loaded {len(points)} points of interest for map {map_id}")
        return points
