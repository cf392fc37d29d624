"""Coordinate transforms between feed space and continent space."""

from enum import Enum

from gw2_presence.domain.errors import DegenerateRectError
from gw2_presence.domain.models import Rect, Vector2D

INCHES_PER_METER = 39.3701


class SourceSpace(Enum):
    """Coordinate spaces a position can be expressed in."""

    # MumbleLink reports positions in meters
    MUMBLE = INCHES_PER_METER
    # Map coordinates are in inches, same units as the map rectangle
    MAP = 1.0

    @property
    def unit_scale(self) -> float:
        return self.value


def distance(a: Vector2D, b: Vector2D) -> float:
    """Euclidean distance between two points."""
    return a.distance_to(b)


def to_continent_space(
    position: Vector2D,
    source_space: SourceSpace,
    map_id: int,
    map_rect: Rect,
    continent_rect: Rect,
) -> Vector2D:
    """Transform a position on a map into the continent coordinate system.

    The map rectangle's y axis points up while the continent's points down,
    so the vertical axis is inverted.

    Args:
        position: Ground-plane position (x, and depth as y) in ``source_space``.
        source_space: Units of ``position``.
        map_id: The map the position is on (used in error messages).
        map_rect: The map's rectangle in map units.
        continent_rect: The same rectangle in continent units.

    Returns:
        The position in continent coordinates.

    Raises:
        DegenerateRectError: If either rectangle has a zero extent.
    """
    if map_rect.width == 0 or map_rect.height == 0:
        raise DegenerateRectError(f"Map {map_id} has a degenerate map rectangle: {map_rect}")
    if continent_rect.width == 0 or continent_rect.height == 0:
        raise DegenerateRectError(
            f"Map {map_id} has a degenerate continent rectangle: {continent_rect}"
        )

    scale = source_space.unit_scale
    map_x = position.x * scale
    map_y = position.y * scale
    map_bottom = max(map_rect.top_left.y, map_rect.bottom_right.y)

    x = continent_rect.top_left.x + (map_x - map_rect.top_left.x) / map_rect.width * (
        continent_rect.width
    )
    y = continent_rect.top_left.y + (map_bottom - map_y) / abs(map_rect.height) * (
        continent_rect.height
    )
    return Vector2D(x, y)
