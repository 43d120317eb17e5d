"""
Configuration classes for region elevation pathing.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from terragine.representation.zone import ElevationZone


@dataclass(frozen=True)
class TracerSettings:
    """Numeric limits shared by the cutaway builder, the tracer and the ground resolver.

    :param max_iterations: Cap on tracer steps and ground resolver fixed point iterations.
    :param min_elevation: Lowest elevation modelled; stands in for an unbounded zone or scene floor bottom.
    :param grid_size: Precision grid the cutaway union snaps its vertices to.
    :param end_tolerance: Distance within which the last waypoint is snapped back onto the true end.
    """
    max_iterations: int = 10_000
    min_elevation: float = -1e06
    grid_size: float = 1.0
    end_tolerance: float = 0.51


DEFAULT_SETTINGS = TracerSettings()


@dataclass
class PathOptions:
    """Options that affect how a single move is treated.

    :param zones: Zones to test; if None every zone in the scene is tested.
    :param flying: True to never drop to a supporting floor, False to always drop, None to keep the state held at the start of the move.
    :param burrowing: True to move straight through zones, False to always surface, None to keep the state held at the start of the move.
    :param samples: Offsets around a point used when testing for zone entry during a fall.
    """
    zones: Optional[Sequence["ElevationZone"]] = None
    flying: Optional[bool] = None
    burrowing: Optional[bool] = None
    samples: Optional[List[Tuple[float, float]]] = None
