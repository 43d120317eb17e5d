import math

import numpy as np


def Clamp(value, min_value, max_value):
    """Clamps a value between a minimum and maximum value.

    :param value: The value to clamp.
    :type value: float
    :param min_value: The minimum value.
    :type min_value: float
    :param max_value: The maximum value.
    :type max_value: float
    :return: The clamped value.
    :rtype: float
    """
    return max(min(value, max_value), min_value)


def AlmostEqual(a, b, epsilon=1e-8):
    """Determines if two values are within a tolerance of one another.

    :param a: The first value.
    :type a: float
    :param b: The second value.
    :type b: float
    :param epsilon: The allowed absolute difference.
    :type epsilon: float
    :return: Whether the values are almost equal.
    :rtype: bool
    """
    return abs(a - b) <= epsilon


def GetDistanceBetween(point1, point2):
    """Returns the distance between two points defined by (x, y) pairs.

    :param point1: The first point.
    :type point1: list
    :param point2: The second point.
    :type point2: list
    :return: The distance between the two points.
    :rtype: float
    """
    return float(np.linalg.norm(np.array(point1, dtype=float) - np.array(point2, dtype=float)))


def PointTowards(origin, target, distance):
    """Returns the point a given distance from the origin in the direction of the target.

    :param origin: The (x, y) point to start from.
    :type origin: list
    :param target: The (x, y) point giving the direction of travel.
    :type target: list
    :param distance: How far to travel from the origin.
    :type distance: float
    :return: The (x, y) point reached. Equal to the origin if origin and target coincide.
    :rtype: tuple
    """
    length = GetDistanceBetween(origin, target)
    if length == 0:
        return (float(origin[0]), float(origin[1]))
    ratio = distance / length
    return (
        origin[0] + (target[0] - origin[0]) * ratio,
        origin[1] + (target[1] - origin[1]) * ratio,
    )


def AngleToUnitVector(degrees):
    """Returns the unit vector pointing along an angle measured counterclockwise from +x.

    :param degrees: The angle in degrees.
    :type degrees: float
    :return: The unit vector.
    :rtype: :class:`numpy.ndarray`
    """
    rads = math.radians(degrees)
    return np.array([math.cos(rads), math.sin(rads)])
