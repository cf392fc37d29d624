"""Vector domain models."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2D:
    """A point or displacement in a 2D coordinate space.

    Equality is exact: the feed only changes values on a genuine update tick.
    """

    x: float = 0.0
    y: float = 0.0

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Vector2D") -> float:
        """Return the Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Vector3D:
    """A point in the feed's 3D game-engine space (y is the vertical axis)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_vector2d(self) -> Vector2D:
        """Project onto the ground plane by dropping the vertical axis."""
        return Vector2D(self.x, self.z)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by two opposite corners."""

    top_left: Vector2D
    bottom_right: Vector2D

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y
