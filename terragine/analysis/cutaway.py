"""Cutaway projection of a straight move.

A cutaway is the profile of the scene beneath a 2D move: the x axis is the planar
distance from the start of the move and the y axis is elevation, increasing upward.
Every zone the move crosses contributes a polygon, the scene floor contributes a
rectangle reaching down to the minimum elevation, and the union of the lot is what
the path tracer walks.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import shapely
import shapely.geometry as sg
from shapely.geometry.polygon import orient

from terragine.config import DEFAULT_SETTINGS, TracerSettings
from terragine.representation.waypoint import CutawayPoint, Waypoint
from terragine.representation.zone import ElevationZone
from terragine.utils.geometrika import (
    EPSILON,
    PointOnSegment,
    PointsAlmostEqual,
    SegmentIntersection,
    SegmentsCross,
)
from terragine.utils.logging import Debug, Error
from terragine.utils.matematika import GetDistanceBetween, PointTowards


# =============================================================================
# Coordinate Mapping
# =============================================================================


def to_cutaway(point: Waypoint, start: Waypoint) -> CutawayPoint:
    """Converts a canvas point to cutaway coordinates relative to the start of a move."""
    return CutawayPoint(GetDistanceBetween(start.xy, point.xy), point.elevation)


def from_cutaway(point: CutawayPoint, start: Waypoint, end: Waypoint) -> Waypoint:
    """Converts a cutaway point back to the canvas.

    :param point: Cutaway point to convert.
    :param start: Start of the move.
    :param end: End of the move.
    :returns: The canvas point ``point.distance`` along the start->end ray, at ``point.elevation``.
    """
    if point.distance == GetDistanceBetween(start.xy, end.xy):
        return Waypoint(end.x, end.y, point.elevation)
    x, y = PointTowards(start.xy, end.xy, point.distance)
    return Waypoint(x, y, point.elevation)


# =============================================================================
# Cutaway Polygons
# =============================================================================


@dataclass(frozen=True)
class CutawayPolygon:
    """A simple polygon of the cutaway, with vertices held as an open ring.

    :param points: Ordered vertices; the last connects back to the first.
    :param shape: The same polygon as a shapely geometry, for containment queries.
    """
    points: Tuple[Tuple[float, float], ...]
    shape: sg.Polygon

    @staticmethod
    def from_shape(shape: sg.Polygon, clockwise: bool = True) -> "CutawayPolygon":
        shape = orient(sg.Polygon(shape.exterior), sign=-1.0 if clockwise else 1.0)
        coords = tuple((float(x), float(y)) for x, y in shape.exterior.coords[:-1])
        return CutawayPolygon(coords, shape)

    def contains(self, xy) -> bool:
        """True only for points strictly inside the polygon."""
        return self.shape.contains(sg.Point(xy))


@dataclass(frozen=True)
class Crossing:
    """Where a segment meets a cutaway polygon edge.

    :param point: Location of the crossing.
    :param t: Fraction along the tested segment.
    :param polygon: Index of the polygon in the query's polygon list.
    :param edge: Index of the edge; edge ``i`` runs from vertex ``i`` to vertex ``i + 1``.
    """
    point: Tuple[float, float]
    t: float
    polygon: int
    edge: int


class CutawayContext:
    """Polygon set of a single path query, with edges and bounds memoized on first use.

    A context is created for each query and discarded when the query finishes; the
    polygons it holds are never mutated.
    """

    def __init__(self, polygons: Sequence[CutawayPolygon]) -> None:
        self.polygons = list(polygons)
        self._edges: Dict[int, List[Tuple[Tuple[float, float], Tuple[float, float]]]] = {}
        self._x_bounds: Dict[int, Tuple[float, float]] = {}

    def edges(self, index: int):
        if index not in self._edges:
            pts = self.polygons[index].points
            self._edges[index] = [(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]
        return self._edges[index]

    def x_bounds(self, index: int) -> Tuple[float, float]:
        if index not in self._x_bounds:
            xs = [pt[0] for pt in self.polygons[index].points]
            self._x_bounds[index] = (min(xs), max(xs))
        return self._x_bounds[index]

    def _reaches(self, index: int, x: float) -> bool:
        return self.x_bounds(index)[1] >= x

    def intersections(self, a, b) -> List[Crossing]:
        """Locates every crossing of segment a|b with the polygon edges, nearest first.

        Crossings at ``a`` itself are dropped, as are polygons lying wholly behind ``a``.
        Crossings at the same point prefer the edge leaving that point.
        """
        ixs = []
        for index in range(len(self.polygons)):
            if not self._reaches(index, a[0]):
                continue
            for edge_index, (A, B) in enumerate(self.edges(index)):
                ix = SegmentIntersection(a, b, A, B)
                if ix is None:
                    continue
                x, y, t0 = ix
                if t0 <= EPSILON:
                    continue
                ixs.append(Crossing((x, y), t0, index, edge_index))
        ixs.sort(key=lambda ix: (ix.t, PointsAlmostEqual(ix.point, self.edges(ix.polygon)[ix.edge][1])))
        return ixs

    def segment_crosses_any(self, a, b) -> bool:
        """True if segment a|b properly crosses any polygon edge."""
        for index in range(len(self.polygons)):
            if not self._reaches(index, min(a[0], b[0])):
                continue
            for A, B in self.edges(index):
                if SegmentsCross(a, b, A, B):
                    return True
        return False

    def boundary_entry(self, a, b) -> Optional[Tuple[int, int]]:
        """Finds the polygon a resting point would sink into by moving toward b.

        :return: ``(polygon, edge)`` for the boundary edge leaving ``a``, or None if moving
            toward b does not enter a polygon whose boundary holds ``a``.
        """
        length = GetDistanceBetween(a, b)
        if length == 0:
            return None
        probe = PointTowards(a, b, min(1e-6, length / 2))
        for index, poly in enumerate(self.polygons):
            if not poly.contains(probe):
                continue
            for edge_index, (A, B) in enumerate(self.edges(index)):
                if PointOnSegment(a, A, B) and not PointsAlmostEqual(a, B):
                    return (index, edge_index)
        return None

    def point_on_edge(self, xy, index: int) -> bool:
        return any(PointOnSegment(xy, A, B) for A, B in self.edges(index))

    def polygon_at(self, xy) -> Optional[int]:
        """Returns the index of the first polygon containing the point or bounding it on an edge."""
        for index, poly in enumerate(self.polygons):
            if poly.contains(xy) or self.point_on_edge(xy, index):
                return index
        return None


# =============================================================================
# Projection
# =============================================================================


def build_cutaway(
    start: Waypoint,
    end: Waypoint,
    zones: Sequence[ElevationZone],
    scene_floor: float,
    forward: bool = True,
    settings: TracerSettings = DEFAULT_SETTINGS,
) -> List[CutawayPolygon]:
    """Constructs the cutaway of every zone along the move from start to end.

    :param start: Start of the move.
    :param end: End of the move.
    :param zones: Zones to project; those the move misses contribute nothing.
    :param scene_floor: Elevation of the scene floor.
    :param forward: True when travel runs toward increasing distance; sets the polygon orientation.
    :param settings: Minimum elevation and precision grid to build with.
    :returns: Hole-free polygons, oriented to be walked in the direction of travel.
    """
    paths = []
    for zone in zones:
        poly = zone.to_cutaway_polygon(start, end, settings.min_elevation)
        if poly is not None and not poly.is_empty:
            paths.append(poly)

    dist = GetDistanceBetween(start.xy, end.xy)
    if dist > 0 and scene_floor > settings.min_elevation:
        paths.append(sg.box(0, settings.min_elevation, dist, scene_floor))
    if not paths:
        return []

    combined = shapely.union_all(paths, grid_size=settings.grid_size)
    combined = combined.simplify(0)

    shapes = [geom for geom in _polygons(combined) if geom.area > 0]
    if not shapes:
        return []

    # Holes run top to bottom in a cutaway, so any hole means a zone is malformed.
    if any(len(shape.interiors) for shape in shapes):
        Error(f"Combined cutaway polygons still have holes. {start} -> {end}")

    # Clockwise, with elevation up, walks the top surface toward increasing distance.
    polygons = [CutawayPolygon.from_shape(shape, clockwise=forward) for shape in shapes]
    polygons.sort(key=lambda poly: min(pt[0] for pt in poly.points))
    Debug(f"Cutaway for {start} -> {end}: {len(polygons)} polygon(s)")
    return polygons


def _polygons(geometry) -> List[sg.Polygon]:
    if geometry.is_empty:
        return []
    if isinstance(geometry, sg.Polygon):
        return [geometry]
    if hasattr(geometry, "geoms"):
        out = []
        for part in geometry.geoms:
            out.extend(_polygons(part))
        return out
    return []
