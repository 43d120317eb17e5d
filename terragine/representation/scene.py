from typing import Iterable, List, Optional

from terragine.representation.waypoint import Waypoint
from terragine.representation.zone import ElevationZone
from terragine.utils.logging import Debug


class Scene(object):
    """Holds the zones of a map together with the elevation of its floor.

    :param name: Name of the scene.
    :param floor_elevation: Ground elevation outside any zone.
    """

    def __init__(self, name: str = "Scene", floor_elevation: float = 0.0) -> None:
        Debug(f"Creating new scene: {name}")
        self.name = name
        self.floor_elevation = floor_elevation
        self.zones = {}

    def set_floor_elevation(self, elevation: float) -> "Scene":
        self.floor_elevation = elevation
        return self

    def add_zone(self, zone: ElevationZone) -> "Scene":
        if zone.name in self.zones:
            raise Exception(f"Zone {zone.name} already exists. Names must be unique.")

        self.zones[zone.name] = zone
        return self

    def add_zones(self, zones: Iterable[ElevationZone]) -> "Scene":
        for zone in zones:
            self.add_zone(zone)
        return self

    def remove_zone(self, name: str) -> "Scene":
        del self.zones[name]
        return self

    def get_zone(self, name: str) -> ElevationZone:
        return self.zones[name]

    def get_zones(self, subset: Optional[Iterable[ElevationZone]] = None) -> List[ElevationZone]:
        """Returns every zone in the scene, or the caller supplied subset when given."""
        if subset is not None:
            return list(subset)
        return list(self.zones.values())

    def elevated_zones(self, subset: Optional[Iterable[ElevationZone]] = None) -> List[ElevationZone]:
        """Returns the zones that model a walkable surface, which excludes stairs."""
        return elevated_zones(self.get_zones(subset))

    def zones_along(self, start: Waypoint, end: Waypoint, subset: Optional[Iterable[ElevationZone]] = None) -> List[ElevationZone]:
        """Returns the elevated zones whose footprint the 2D move touches."""
        return [zone for zone in self.elevated_zones(subset) if zone.intersects_segment(start, end)]


def elevated_zones(zones: Iterable[ElevationZone]) -> List[ElevationZone]:
    return [zone for zone in zones if zone.models_surface]
