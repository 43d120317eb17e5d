"""Tests for the cutaway projector and coordinate mapping."""

import logging

import pytest
import shapely.geometry as sg

from terragine.analysis.cutaway import (
    CutawayContext,
    CutawayPolygon,
    build_cutaway,
    from_cutaway,
    to_cutaway,
)
from terragine.representation.waypoint import CutawayPoint, Waypoint
from terragine.representation.zone import Plateau, Stairs


def wall(x0=4, x1=6, elevation=10, bottom=None, name="Wall"):
    return Plateau(name, [(x0, -1), (x1, -1), (x1, 1), (x0, 1)], elevation, elevation_bottom=bottom)


START = Waypoint(0, 0, 0)
END = Waypoint(10, 0, 0)


class TestCoordinateMapping:
    def test_to_cutaway(self):
        pt = to_cutaway(Waypoint(3, 4, 7), Waypoint(0, 0, 1))
        assert pt.distance == pytest.approx(5)
        assert pt.elevation == 7

    def test_from_cutaway(self):
        pt = from_cutaway(CutawayPoint(5, 2), Waypoint(1, 2, 0), Waypoint(7, 10, 0))
        assert (pt.x, pt.y) == pytest.approx((4, 6))
        assert pt.elevation == 2

    @pytest.mark.parametrize("fraction", [0.0, 0.25, 0.5, 0.9, 1.0])
    def test_round_trip_on_segment(self, fraction):
        start = Waypoint(1, 2, 0)
        end = Waypoint(7, 10, 4)
        point = Waypoint(1 + 6 * fraction, 2 + 8 * fraction, 3)
        back = from_cutaway(to_cutaway(point, start), start, end)
        assert (back.x, back.y) == pytest.approx((point.x, point.y))
        assert back.elevation == point.elevation

    def test_end_maps_exactly(self):
        start = Waypoint(0.1, 0.2, 0)
        end = Waypoint(3.3, 7.7, 0)
        back = from_cutaway(to_cutaway(end, start), start, end)
        assert (back.x, back.y) == (end.x, end.y)


class TestBuildCutaway:
    def test_floor_only_when_no_zones(self):
        polys = build_cutaway(START, END, [], 0)
        assert len(polys) == 1
        assert polys[0].shape.bounds == pytest.approx((0, -1e6, 10, 0))

    def test_plateau_merges_with_floor(self):
        polys = build_cutaway(START, END, [wall()], 0)
        assert len(polys) == 1
        upper = {pt for pt in polys[0].points if pt[1] > -1e6}
        assert upper == {(0, 0), (4, 0), (4, 10), (6, 10), (6, 0), (10, 0)}

    def test_polygons_walk_clockwise_forward(self):
        polys = build_cutaway(START, END, [wall()], 0)
        assert not polys[0].shape.exterior.is_ccw
        polys = build_cutaway(START, END, [wall()], 0, forward=False)
        assert polys[0].shape.exterior.is_ccw

    def test_floating_zone_stays_separate(self):
        polys = build_cutaway(START, END, [wall(bottom=5)], 0)
        assert len(polys) == 2

    def test_stairs_contribute_nothing(self):
        stairs = Stairs("Steps", [(4, -1), (6, -1), (6, 1), (4, 1)], 0, 10)
        polys = build_cutaway(START, END, [stairs], 0)
        assert len(polys) == 1
        assert polys[0].shape.bounds[3] == 0

    def test_vertices_snap_to_grid(self):
        polys = build_cutaway(START, END, [wall(x0=4.2, x1=5.9, elevation=9.7)], 0)
        for x, y in polys[0].points:
            assert x == round(x)
            assert y == round(y)

    def test_hole_is_logged(self, caplog):
        zones = [
            wall(2, 8, 10, bottom=8, name="Roof"),
            wall(2, 3, 10, name="Left"),
            wall(7, 8, 10, name="Right"),
        ]
        with caplog.at_level(logging.ERROR, logger="terragine"):
            polys = build_cutaway(START, END, zones, 0)
        assert "holes" in caplog.text
        assert len(polys) == 1
        assert not polys[0].shape.interiors


class TestCutawayPolygon:
    def test_from_shape_drops_holes_and_closing_vertex(self):
        shape = sg.Polygon(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(4, 4), (6, 4), (6, 6), (4, 6)]],
        )
        poly = CutawayPolygon.from_shape(shape)
        assert len(poly.points) == 4
        assert not poly.shape.interiors
        assert not poly.shape.exterior.is_ccw

    def test_contains_is_strict(self):
        poly = CutawayPolygon.from_shape(sg.box(0, 0, 10, 10))
        assert poly.contains((5, 5))
        assert not poly.contains((0, 5))
        assert not poly.contains((20, 5))


class TestCutawayContext:
    def make_context(self):
        return CutawayContext(build_cutaway(START, END, [wall()], 0))

    def test_intersections_nearest_first(self):
        context = self.make_context()
        ixs = context.intersections((0, 0), (10, 0))
        assert ixs[0].point == (4, 0)
        assert [ix.t for ix in ixs] == sorted(ix.t for ix in ixs)

    def test_intersections_skip_start_point(self):
        context = self.make_context()
        ixs = context.intersections((4, 0), (4, 20))
        assert all(ix.t > 0 for ix in ixs)

    def test_crossing_edge_leads_up_the_wall(self):
        context = self.make_context()
        ix = context.intersections((0, 0), (10, 0))[0]
        A, B = context.edges(ix.polygon)[ix.edge]
        assert B == (4, 10)

    def test_segment_crosses_any(self):
        context = self.make_context()
        assert context.segment_crosses_any((0, 5), (10, 5))
        assert not context.segment_crosses_any((0, 20), (10, 20))
        assert not context.segment_crosses_any((4, 10), (10, 10))

    def test_boundary_entry_follows_surface(self):
        context = self.make_context()
        entry = context.boundary_entry((4, 10), (10, 0))
        assert entry is not None
        polygon, edge = entry
        assert context.edges(polygon)[edge] == ((4, 10), (6, 10))

    def test_boundary_entry_ignores_moves_along_surface(self):
        context = self.make_context()
        assert context.boundary_entry((0, 0), (10, 0)) is None
        assert context.boundary_entry((4, 10), (4, 20)) is None

    def test_polygon_at(self):
        context = self.make_context()
        assert context.polygon_at((5, 5)) == 0
        assert context.polygon_at((2, 3)) is None

    def test_edges_are_memoized_per_context(self):
        context = self.make_context()
        assert context.edges(0) is context.edges(0)
        other = CutawayContext(context.polygons)
        assert other.edges(0) is not context.edges(0)

