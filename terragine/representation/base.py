from typing import List, Tuple, Union

import shapely.geometry as sg


class FootprintObject(object):
    """Base class for objects which occupy an area of the canvas. The area is held as a shapely polygon.

    :param footprint: Either a shapely polygon or the ordered vertices of one.
    :type footprint: :class:`shapely.geometry.Polygon` or List[Tuple[float, float]]
    :param name: Name of the object.
    :type name: str
    :raises ValueError: If the footprint is not a valid polygon with positive area.
    """

    def __init__(
        self,
        footprint: Union[sg.Polygon, List[Tuple[float, float]]],
        name: str = "",
    ) -> None:
        self.name = name
        if not isinstance(footprint, sg.Polygon):
            footprint = sg.Polygon(footprint)
        if footprint.is_empty or not footprint.is_valid or footprint.area <= 0:
            raise ValueError(f"Footprint of {name!r} is not a valid polygon.")
        self.footprint = footprint

    def covers_xy(self, x: float, y: float) -> bool:
        """Returns True if the 2D location lies inside the footprint or on its boundary."""
        return self.footprint.covers(sg.Point(x, y))

    def intersects_segment(self, start, end) -> bool:
        """Returns True if the 2D segment between two objects with ``x``/``y`` touches the footprint."""
        if start.x == end.x and start.y == end.y:
            return self.covers_xy(start.x, start.y)
        return self.footprint.intersects(
            sg.LineString([(start.x, start.y), (end.x, end.y)])
        )
