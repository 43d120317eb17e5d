"""Planar segment primitives used by the cutaway tracer.

Points are plain ``(x, y)`` pairs. Intersection tests are inclusive of
segment endpoints unless stated otherwise.
"""

from typing import Optional, Tuple

from terragine.utils.matematika import AlmostEqual, Clamp

EPSILON = 1e-8


def Orientation(a, b, c) -> float:
    """Returns twice the signed area of the triangle a, b, c.

    Positive when c lies to the left of a->b, negative to the right and zero when collinear.
    """
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def PointsAlmostEqual(a, b, epsilon: float = EPSILON) -> bool:
    return AlmostEqual(a[0], b[0], epsilon) and AlmostEqual(a[1], b[1], epsilon)


def LineLineIntersection(a, b, c, d) -> Optional[Tuple[float, float, float, float]]:
    """Intersects the infinite lines through a|b and c|d.

    :return: ``(x, y, t0, t1)`` where t0 is the fraction along a|b and t1 the fraction along c|d, or None when the lines are parallel.
    :rtype: tuple
    """
    denom = (d[1] - c[1]) * (b[0] - a[0]) - (d[0] - c[0]) * (b[1] - a[1])
    if denom == 0:
        return None
    t0 = ((d[0] - c[0]) * (a[1] - c[1]) - (d[1] - c[1]) * (a[0] - c[0])) / denom
    t1 = ((b[0] - a[0]) * (a[1] - c[1]) - (b[1] - a[1]) * (a[0] - c[0])) / denom
    x = a[0] + t0 * (b[0] - a[0])
    y = a[1] + t0 * (b[1] - a[1])
    return (x, y, t0, t1)


def SegmentIntersection(a, b, c, d) -> Optional[Tuple[float, float, float]]:
    """Intersects segments a|b and c|d, endpoints included.

    Collinear overlaps are not reported.

    :return: ``(x, y, t0)`` with t0 the fraction along a|b, or None.
    :rtype: tuple
    """
    ix = LineLineIntersection(a, b, c, d)
    if ix is None:
        return None
    x, y, t0, t1 = ix
    if t0 < -EPSILON or t0 > 1 + EPSILON:
        return None
    if t1 < -EPSILON or t1 > 1 + EPSILON:
        return None
    t0 = Clamp(t0, 0.0, 1.0)

    # Snap onto the shared vertex so later equality tests hold exactly.
    if AlmostEqual(t1, 0.0):
        x, y = c[0], c[1]
    elif AlmostEqual(t1, 1.0):
        x, y = d[0], d[1]
    return (x, y, t0)


def SegmentsCross(a, b, c, d) -> bool:
    """Returns True only if a|b and c|d cross at a single interior point of both segments."""
    o1 = Orientation(a, b, c)
    o2 = Orientation(a, b, d)
    o3 = Orientation(c, d, a)
    o4 = Orientation(c, d, b)
    if abs(o1) <= EPSILON or abs(o2) <= EPSILON or abs(o3) <= EPSILON or abs(o4) <= EPSILON:
        return False
    return (o1 > 0) != (o2 > 0) and (o3 > 0) != (o4 > 0)


def ClosestPointOnSegment(p, a, b) -> Tuple[float, float]:
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length2 = dx * dx + dy * dy
    if length2 == 0:
        return (a[0], a[1])
    t = Clamp(((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / length2, 0.0, 1.0)
    return (a[0] + t * dx, a[1] + t * dy)


def PointOnSegment(p, a, b, epsilon: float = EPSILON) -> bool:
    return PointsAlmostEqual(p, ClosestPointOnSegment(p, a, b), epsilon)
