"""Elevation queries against the zones of a scene.

Determines whether a point is on the ground, floating or buried, and where the
supporting floor beneath a point lies.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple

from terragine.config import DEFAULT_SETTINGS, TracerSettings
from terragine.representation.waypoint import Waypoint
from terragine.representation.zone import ElevationZone
from terragine.utils.logging import Debug, Error


class ElevationLocation(Enum):
    UNDERGROUND = 0
    GROUND = 1
    FLOATING = 2


def elevation_type(
    point: Waypoint, zones: Sequence[ElevationZone], scene_floor: float
) -> ElevationLocation:
    """Determines if a point is on the scene floor, on a plateau or ramp, in the air, or inside a zone.

    To be on the ground the point has to be on the surface of every zone it is inside, or
    be inside no zone and at the scene floor.

    :param point: Location to test.
    :param zones: Zones to consider.
    :param scene_floor: Elevation of the scene floor.
    :return: The classification of the point.
    :rtype: :class:`ElevationLocation`
    """
    inside = False
    off_surface = False
    for zone in zones:
        if not zone.contains(point, point.elevation):
            continue
        inside = True
        if zone.elevation_upon_entry(point) != point.elevation:
            off_surface = True
            break

    if inside and off_surface:
        return ElevationLocation.UNDERGROUND
    if inside:
        return ElevationLocation.GROUND
    if point.elevation == scene_floor:
        return ElevationLocation.GROUND
    return ElevationLocation.FLOATING


def nearest_ground_elevation(
    point: Waypoint,
    zones: Sequence[ElevationZone],
    scene_floor: float,
    burrowing: bool = False,
    samples: Optional[Sequence[Tuple[float, float]]] = None,
    settings: TracerSettings = DEFAULT_SETTINGS,
) -> float:
    """From the provided position, determines the highest supporting floor.

    This could be a plateau, a ramp, or the scene floor. A point outside every zone first
    falls until it lands on a zone or the floor; it is then pushed up by every zone it is
    inside until no zone raises it further, which lets a ramp sitting on a plateau lift
    the point above the plateau's surface.

    :param point: The location to test.
    :param zones: Zones to consider.
    :param scene_floor: Elevation of the scene floor.
    :param burrowing: If True, the point falls but never moves up once inside a zone.
    :param samples: Offsets around the point tested for zone entry while falling.
    :param settings: Iteration cap for the upward search.
    :return: The elevation of the nearest ground.
    :rtype: float
    """
    curr_elevation = point.elevation

    # Already inside a zone.
    curr_zones = [zone for zone in zones if zone.contains(point, curr_elevation)]
    if burrowing and curr_zones:
        return curr_elevation

    # Fall toward the floor and land on the first zone met.
    if not curr_zones:
        if curr_elevation == scene_floor:
            return scene_floor
        entries = []
        for zone in zones:
            entry = zone.fall_entry_elevation(point, curr_elevation, scene_floor, samples)
            if entry is None:
                continue
            entries.append((curr_elevation - entry, zone))
        if not entries:
            return scene_floor

        # Stable sort, so equal falls keep the order the zones were given in.
        entries.sort(key=lambda entry: entry[0])
        first_zone = entries[0][1]
        curr_elevation = first_zone.elevation_upon_entry(point)
        Debug(f"Fell onto {first_zone.name} at elevation {curr_elevation}")

    if burrowing:
        return curr_elevation

    # Take the highest entry elevation of the zones holding the point, until it settles.
    iteration = 0
    max_elevation = curr_elevation
    while True:
        iteration += 1
        curr_elevation = max_elevation
        max_elevation = float("-inf")
        for zone in zones:
            if not zone.contains(point, curr_elevation):
                continue
            max_elevation = max(max_elevation, zone.elevation_upon_entry(point))
        if max_elevation == float("-inf"):
            # Fell through every zone; the last elevation is where it rests.
            break
        if max_elevation == curr_elevation:
            break
        if iteration >= settings.max_iterations:
            Error(f"nearest_ground_elevation|Max iterations reached! {point}")
            curr_elevation = max_elevation
            break
    return curr_elevation
