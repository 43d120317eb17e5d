"""Immutable point types for canvas space and cutaway space."""

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class Waypoint:
    """A location on the canvas together with an elevation.

    :param x: Horizontal canvas coordinate.
    :param y: Vertical canvas coordinate.
    :param elevation: Elevation of the agent at this location.
    """
    x: float
    y: float
    elevation: float = 0.0

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def with_elevation(self, elevation: float) -> "Waypoint":
        return replace(self, elevation=elevation)

    def xy_equals(self, other: "Waypoint") -> bool:
        return self.x == other.x and self.y == other.y

    def equals(self, other: "Waypoint") -> bool:
        """Same 2D position and elevation."""
        return self.xy_equals(other) and self.elevation == other.elevation


@dataclass(frozen=True)
class CutawayPoint:
    """A location in the cutaway profile of a move.

    :param distance: Planar distance from the start of the move.
    :param elevation: Elevation at that distance.
    """
    distance: float
    elevation: float

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.distance, self.elevation)

    @staticmethod
    def from_xy(xy) -> "CutawayPoint":
        return CutawayPoint(float(xy[0]), float(xy[1]))
