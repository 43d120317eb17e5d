from terragine.analysis.elevation import ElevationLocation
from terragine.analysis.pathing import RegionsElevationHandler, construct_regions_path
from terragine.config import PathOptions, TracerSettings
from terragine.representation.scene import Scene
from terragine.representation.waypoint import CutawayPoint, Waypoint
from terragine.representation.zone import Plateau, Ramp, Stairs
