"""Scene zone definitions that set an agent's elevation on entry."""

import math
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

import numpy as np
import shapely.geometry as sg
from shapely.ops import unary_union

from terragine.representation.base import FootprintObject
from terragine.representation.waypoint import Waypoint
from terragine.utils.matematika import AngleToUnitVector, Clamp, GetDistanceBetween, PointTowards

DEFAULT_SAMPLES = [(0.0, 0.0)]


class ElevationZone(FootprintObject, ABC):
    """Represents an area of the scene with a top surface the agent walks on.

    A zone occupies its footprint from ``elevation_bottom`` up to its surface. A point is
    inside the zone when its 2D location is covered by the footprint and its elevation lies
    in that range, both ends included.

    :param name: Unique identifier for this zone.
    :param footprint: The 2D polygon defining the zone's extent.
    :param elevation_bottom: Lowest elevation the zone occupies. None means unbounded below.
    """

    models_surface = True

    def __init__(self, name: str, footprint, elevation_bottom: Optional[float] = None):
        super().__init__(footprint, name)
        self.elevation_bottom = elevation_bottom

    @property
    def bottom(self) -> float:
        return float("-inf") if self.elevation_bottom is None else self.elevation_bottom

    @abstractmethod
    def surface_elevation(self, x: float, y: float) -> float:
        """Elevation of the zone's top surface at a 2D location inside the footprint."""
        pass

    def elevation_upon_entry(self, point: Waypoint) -> float:
        """Elevation the agent assumes immediately upon entering the zone at this point."""
        return self.surface_elevation(point.x, point.y)

    def contains(self, point: Waypoint, elevation: Optional[float] = None) -> bool:
        """Checks if the point, at the given elevation, is inside this zone.

        :param point: Location to test.
        :param elevation: Elevation to test; defaults to the point's own elevation.
        :returns: True if inside the footprint and between the bottom and the surface.
        """
        if elevation is None:
            elevation = point.elevation
        if not self.covers_xy(point.x, point.y):
            return False
        return self.bottom <= elevation <= self.surface_elevation(point.x, point.y)

    def fall_entry_elevation(
        self,
        point: Waypoint,
        from_elevation: float,
        to_elevation: float,
        samples: Optional[Sequence[Tuple[float, float]]] = None,
    ) -> Optional[float]:
        """Finds the first elevation at which a vertical fall enters this zone.

        Each sample offset around the point is tested; the highest entry wins.

        :returns: The entry elevation, or None if the fall never enters the zone.
        """
        entry = None
        for dx, dy in samples or DEFAULT_SAMPLES:
            x, y = point.x + dx, point.y + dy
            if not self.covers_xy(x, y):
                continue
            candidate = min(from_elevation, self.surface_elevation(x, y))
            if candidate < max(to_elevation, self.bottom):
                continue
            if entry is None or candidate > entry:
                entry = candidate
        return entry

    def to_cutaway_polygon(self, start: Waypoint, end: Waypoint, min_elevation: float):
        """Projects this zone onto the (distance from start, elevation) plane of a move.

        :param start: Start of the move.
        :param end: End of the move.
        :param min_elevation: Elevation used in place of an unbounded bottom.
        :returns: A shapely polygon or multipolygon, or None if the move misses the zone.
        """
        if start.xy_equals(end):
            return None
        line = sg.LineString([start.xy, end.xy])
        if not self.footprint.intersects(line):
            return None

        bottom = max(self.bottom, min_elevation)
        polys = []
        for piece in _line_pieces(self.footprint.intersection(line)):
            coords = list(piece.coords)
            d0 = GetDistanceBetween(start.xy, coords[0])
            d1 = GetDistanceBetween(start.xy, coords[-1])
            if d0 > d1:
                d0, d1 = d1, d0
            if d1 - d0 <= 0:
                continue
            top = [(d, max(e, bottom)) for d, e in self._cutaway_surface(start, end, d0, d1)]
            poly = sg.Polygon([(d0, bottom)] + top + [(d1, bottom)])
            if poly.is_valid and poly.area > 0:
                polys.append(poly)
        if not polys:
            return None
        return unary_union(polys)

    def _cutaway_surface(self, start: Waypoint, end: Waypoint, d0: float, d1: float) -> List[Tuple[float, float]]:
        """Top edge of a cutaway piece running from distance d0 to d1, as (distance, elevation) pairs."""
        return [
            (d0, self._surface_along(start, end, d0)),
            (d1, self._surface_along(start, end, d1)),
        ]

    def _surface_along(self, start: Waypoint, end: Waypoint, distance: float) -> float:
        x, y = PointTowards(start.xy, end.xy, distance)
        return self.surface_elevation(x, y)


class Plateau(ElevationZone):
    """Zone with a flat top surface at a fixed elevation.

    :param name: Unique identifier for this zone.
    :param footprint: The 2D polygon defining the zone's extent.
    :param plateau_elevation: Elevation of the top surface.
    :param elevation_bottom: Lowest elevation the zone occupies. None means unbounded below.
    """

    def __init__(self, name: str, footprint, plateau_elevation: float, elevation_bottom: Optional[float] = None):
        super().__init__(name, footprint, elevation_bottom)
        self.plateau_elevation = plateau_elevation

    def surface_elevation(self, x: float, y: float) -> float:
        return self.plateau_elevation


class Ramp(ElevationZone):
    """Zone whose top surface rises linearly across the footprint.

    The low edge of the ramp is the footprint's furthest extent opposite ``direction``;
    the high edge is its furthest extent along ``direction``.

    :param name: Unique identifier for this zone.
    :param footprint: The 2D polygon defining the zone's extent.
    :param plateau_elevation: Elevation at the high edge.
    :param ramp_floor: Elevation at the low edge.
    :param direction: Direction of ascent in degrees, counterclockwise from +x.
    :param step_size: If set, the surface rises in discrete steps of this height.
    :param elevation_bottom: Lowest elevation the zone occupies. None means unbounded below.
    """

    def __init__(
        self,
        name: str,
        footprint,
        plateau_elevation: float,
        ramp_floor: float = 0.0,
        direction: float = 0.0,
        step_size: Optional[float] = None,
        elevation_bottom: Optional[float] = None,
    ):
        super().__init__(name, footprint, elevation_bottom)
        if step_size is not None and step_size <= 0:
            raise ValueError(f"Ramp {name!r} step size must be positive, got {step_size}.")
        self.plateau_elevation = plateau_elevation
        self.ramp_floor = ramp_floor
        self.direction = direction
        self.step_size = step_size

        self._axis = AngleToUnitVector(direction)
        projections = np.asarray(self.footprint.exterior.coords) @ self._axis
        self._min_projection = float(projections.min())
        self._max_projection = float(projections.max())

    def _raw_elevation(self, x: float, y: float) -> float:
        span = self._max_projection - self._min_projection
        t = 0.0 if span == 0 else (float(np.dot((x, y), self._axis)) - self._min_projection) / span
        t = Clamp(t, 0.0, 1.0)
        return self.ramp_floor + t * (self.plateau_elevation - self.ramp_floor)

    def _quantize(self, elevation: float) -> float:
        if self.step_size is None:
            return elevation
        steps = math.floor(round((elevation - self.ramp_floor) / self.step_size, 9))
        return self.ramp_floor + steps * self.step_size

    def surface_elevation(self, x: float, y: float) -> float:
        return self._quantize(self._raw_elevation(x, y))

    def _cutaway_surface(self, start, end, d0, d1):
        if self.step_size is None:
            return super()._cutaway_surface(start, end, d0, d1)

        # Raw elevation is linear in distance along a straight move.
        e0 = self._raw_elevation(*PointTowards(start.xy, end.xy, d0))
        e1 = self._raw_elevation(*PointTowards(start.xy, end.xy, d1))
        breaks = []
        if e0 != e1:
            lo, hi = min(e0, e1), max(e0, e1)
            k = math.floor((lo - self.ramp_floor) / self.step_size) + 1
            level = self.ramp_floor + k * self.step_size
            while level < hi:
                breaks.append(d0 + (level - e0) / (e1 - e0) * (d1 - d0))
                k += 1
                level = self.ramp_floor + k * self.step_size
        stops = [d0] + sorted(breaks) + [d1]

        top = []
        for a, b in zip(stops, stops[1:]):
            mid = e0 + ((a + b) / 2 - d0) / (d1 - d0) * (e1 - e0)
            e = self._quantize(mid)
            for pt in ((a, e), (b, e)):
                if not top or top[-1] != pt:
                    top.append(pt)
        return top


class Stairs(ElevationZone):
    """Zone that moves the agent between two landings.

    Entering below the midpoint puts the agent on the top landing, otherwise on the bottom
    landing. Stairs are a vertical teleport and take no part in cutaway modelling.

    :param name: Unique identifier for this zone.
    :param footprint: The 2D polygon defining the zone's extent.
    :param elevation_bottom: Elevation of the bottom landing.
    :param elevation_top: Elevation of the top landing.
    """

    models_surface = False

    def __init__(self, name: str, footprint, elevation_bottom: float, elevation_top: float):
        if elevation_top <= elevation_bottom:
            raise ValueError(f"Stairs {name!r} top must be above the bottom.")
        super().__init__(name, footprint, elevation_bottom)
        self.elevation_top = elevation_top

    def surface_elevation(self, x: float, y: float) -> float:
        return self.elevation_top

    def elevation_upon_entry(self, point: Waypoint) -> float:
        midpoint = (self.elevation_bottom + self.elevation_top) / 2
        if point.elevation < midpoint:
            return self.elevation_top
        return self.elevation_bottom

    def to_cutaway_polygon(self, start: Waypoint, end: Waypoint, min_elevation: float):
        return None


def _line_pieces(geometry) -> List[sg.LineString]:
    """Flattens the result of a line intersection to its non-degenerate line strings."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, sg.LineString):
        return [geometry]
    if hasattr(geometry, "geoms"):
        pieces = []
        for part in geometry.geoms:
            pieces.extend(_line_pieces(part))
        return pieces
    return []
