"""Paths for straight moves across plateaus, ramps and the scene floor.

Unless flying or burrowing, a path runs along the top of any ramp or plateau it meets,
moving up onto the zone on entry and back down on exit.

Flying and burrowing rules:

* Flying

  - True: never reduce elevation to reach a supporting floor.
  - False: move vertically to the nearest supporting floor.
  - None: if floating at the start, fly until reaching a supporting floor.

* Burrowing

  - True: move through zones instead of walking on their surfaces.
  - False: move vertically to the nearest supporting floor.
  - None: if underground at the start, burrow until reaching a supporting floor.

Internally the move is projected to a cutaway (see :mod:`terragine.analysis.cutaway`)
and the path is traced over the cutaway polygons, then mapped back to the canvas.
"""

import math
from typing import List, Optional, Sequence, Tuple

from terragine.analysis.cutaway import (
    CutawayContext,
    build_cutaway,
    from_cutaway,
    to_cutaway,
)
from terragine.analysis.elevation import (
    ElevationLocation,
    elevation_type,
    nearest_ground_elevation,
)
from terragine.config import DEFAULT_SETTINGS, PathOptions, TracerSettings
from terragine.representation.scene import Scene, elevated_zones
from terragine.representation.waypoint import CutawayPoint, Waypoint
from terragine.representation.zone import ElevationZone
from terragine.utils.geometrika import EPSILON, PointsAlmostEqual
from terragine.utils.logging import Debug, Error
from terragine.utils.matematika import AlmostEqual


def construct_regions_path(
    start: Waypoint,
    end: Waypoint,
    zones: Sequence[ElevationZone],
    scene_floor: float,
    flying: Optional[bool] = None,
    burrowing: Optional[bool] = None,
    samples: Optional[Sequence[Tuple[float, float]]] = None,
    settings: TracerSettings = DEFAULT_SETTINGS,
) -> List[Waypoint]:
    """Creates the path followed by a straight move that may pass through zones.

    :param start: Start of the move.
    :param end: End of the move.
    :param zones: Zones to consider; stairs are ignored.
    :param scene_floor: Elevation of the scene floor.
    :param flying: If True, the agent flies rather than falls between zones.
    :param burrowing: If True, the agent burrows straight through zones.
    :param samples: Offsets passed to the ground resolver for vertical moves.
    :param settings: Tracer limits.
    :return: Waypoints ordered by distance from the start, start and end included.
    :rtype: List[:class:`Waypoint`]
    """
    if start.equals(end) or (flying and burrowing):
        return [start, end]

    zones = elevated_zones(zones)
    if not zones:
        return [start, end]

    end_type = elevation_type(end, zones, scene_floor)

    # Elevation-only change; the only question is whether the end drops to the ground.
    if start.xy_equals(end):
        if (flying is False and end_type == ElevationLocation.FLOATING) or (
            burrowing is False and end_type == ElevationLocation.UNDERGROUND
        ):
            end_elevation = nearest_ground_elevation(
                end, zones, scene_floor, burrowing=bool(burrowing), samples=samples, settings=settings
            )
            end = end.with_elevation(end_elevation)
        return [start, end]

    zones = [zone for zone in zones if zone.intersects_segment(start, end)]
    if not zones:
        return [start, end]

    start2d = to_cutaway(start, start)
    true_end2d = to_cutaway(end, start)

    # The cutaway union snaps to the precision grid, so round the end down to keep it reachable from the floor.
    end2d = CutawayPoint(float(math.floor(true_end2d.distance)), true_end2d.elevation)

    polygons = build_cutaway(
        start, end, zones, scene_floor, forward=end2d.distance > start2d.distance, settings=settings
    )
    if not polygons:
        return [start, end]
    context = CutawayContext(polygons)

    start_type = elevation_type(start, zones, scene_floor)
    waypoints = _trace(context, start2d, end2d, start_type, end_type, scene_floor, flying, burrowing, settings)

    # Undo the rounding of the end point.
    last = waypoints[-1]
    if len(waypoints) == 1:
        waypoints.append(CutawayPoint(true_end2d.distance, last.elevation))
    elif AlmostEqual(last.distance, true_end2d.distance, settings.end_tolerance):
        waypoints[-1] = CutawayPoint(true_end2d.distance, last.elevation)

    return [from_cutaway(waypoint, start, end) for waypoint in waypoints]


def _trace(
    context: CutawayContext,
    start2d: CutawayPoint,
    end2d: CutawayPoint,
    start_type: ElevationLocation,
    end_type: ElevationLocation,
    scene_floor: float,
    flying: Optional[bool],
    burrowing: Optional[bool],
    settings: TracerSettings,
) -> List[CutawayPoint]:
    """Marches the cutaway from start to end.

    Each step either moves in a straight line toward the current target or, once a
    polygon has been met, walks the polygon's boundary one vertex at a time. Polygons
    are oriented so that their boundary runs over the top surface in the direction of
    travel.
    """
    FLOATING = ElevationLocation.FLOATING
    UNDERGROUND = ElevationLocation.UNDERGROUND
    end_xy = end2d.xy

    # Floating or buried at the start without flying or burrowing: drop to the floor first.
    curr = start2d.xy
    target = end_xy
    if (burrowing is False and start_type == UNDERGROUND) or (
        flying is False and start_type == FLOATING
    ):
        target = (curr[0], scene_floor)

    dest_poly = context.polygon_at(end_xy) if end_type == UNDERGROUND else None
    curr_poly = None
    curr_index = -1
    # Burrowing unset and buried at the start: keep burrowing until the first surface is crossed.
    buried = burrowing is None and start_type == UNDERGROUND
    waypoints: List[Tuple[float, float]] = []
    iteration = 0
    while iteration < settings.max_iterations:
        iteration += 1
        _push(waypoints, curr)

        # Target lies behind us, as when walking off a polygon floating above the floor.
        if target[0] < curr[0]:
            target = end_xy if flying else (curr[0], scene_floor)
            curr_poly = None

        # Flying never descends below both the end and the current position.
        if flying and target[1] < end_xy[1] and target[1] < curr[1]:
            target = end_xy
            curr_poly = None

        if PointsAlmostEqual(curr, target):
            target = end_xy
            curr_poly = None
        if curr[0] >= end_xy[0]:
            break

        # Straight shot to a floating end, or to a buried end inside the polygon we are in.
        if (flying and end_type == FLOATING) or (
            burrowing and dest_poly is not None and dest_poly == curr_poly
        ):
            if not context.segment_crosses_any(curr, end_xy):
                curr = end_xy
                curr_poly = None
                continue

        if curr_poly is None and not (flying or burrowing or buried):
            # Resting on a surface that the straight move would sink into: walk the surface instead.
            entry = context.boundary_entry(curr, target)
            if entry is not None:
                curr_poly, edge = entry
                points = context.polygons[curr_poly].points
                curr_index = (edge + 1) % len(points)
                target = points[curr_index]
                continue

        if curr_poly is None:
            ixs = context.intersections(curr, target)
            if not ixs:
                curr = target
                continue

            ix = ixs[0]
            curr = ix.point
            curr_poly = ix.polygon
            buried = False

            if burrowing:
                exit_ix = next(
                    (
                        other
                        for other in ixs[1:]
                        if other.polygon == ix.polygon and other.t > ix.t + EPSILON
                    ),
                    None,
                )
                if exit_ix is not None:
                    _push(waypoints, curr)
                    curr = exit_ix.point
                    target = end_xy
                    curr_poly = None
                    continue

            points = context.polygons[curr_poly].points
            curr_index = (ix.edge + 1) % len(points)
            target = points[curr_index]
            continue

        # Walk to the next vertex of the polygon.
        points = context.polygons[curr_poly].points
        curr_index = (curr_index + 1) % len(points)
        curr = target
        target = points[curr_index]
    else:
        Error(f"construct_regions_path|Iteration exceeded max iterations! {start2d} -> {end2d}")

    Debug(f"Traced {len(waypoints)} cutaway waypoint(s) in {iteration} step(s)")
    return [CutawayPoint.from_xy(xy) for xy in waypoints]


def _push(waypoints: List[Tuple[float, float]], xy) -> None:
    if waypoints and PointsAlmostEqual(waypoints[-1], xy):
        return
    waypoints.append((float(xy[0]), float(xy[1])))


class RegionsElevationHandler(object):
    """Handles movement across the elevated zones of a scene.

    :param scene: Scene supplying the zones and the floor elevation.
    :param settings: Tracer limits.
    """

    ELEVATION_LOCATIONS = ElevationLocation

    def __init__(self, scene: Scene, settings: TracerSettings = DEFAULT_SETTINGS) -> None:
        self.scene = scene
        self.settings = settings

    @property
    def scene_floor(self) -> float:
        return self.scene.floor_elevation

    def elevated_zones(self, zones: Optional[Sequence[ElevationZone]] = None) -> List[ElevationZone]:
        return self.scene.elevated_zones(zones)

    def construct_regions_path(
        self, start: Waypoint, end: Waypoint, options: Optional[PathOptions] = None
    ) -> List[Waypoint]:
        """Creates the path for a straight move, see :func:`construct_regions_path`."""
        options = options or PathOptions()
        return construct_regions_path(
            start,
            end,
            self.elevated_zones(options.zones),
            self.scene_floor,
            flying=options.flying,
            burrowing=options.burrowing,
            samples=options.samples,
            settings=self.settings,
        )

    def nearest_ground_elevation(
        self,
        point: Waypoint,
        zones: Optional[Sequence[ElevationZone]] = None,
        samples: Optional[Sequence[Tuple[float, float]]] = None,
        burrowing: bool = False,
    ) -> float:
        return nearest_ground_elevation(
            point,
            self.elevated_zones(zones),
            self.scene_floor,
            burrowing=burrowing,
            samples=samples,
            settings=self.settings,
        )

    def elevation_type(
        self, point: Waypoint, zones: Optional[Sequence[ElevationZone]] = None
    ) -> ElevationLocation:
        return elevation_type(point, self.elevated_zones(zones), self.scene_floor)
