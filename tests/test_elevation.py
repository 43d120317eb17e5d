"""Tests for elevation classification and nearest ground resolution."""

import logging

import pytest

from terragine.analysis.elevation import (
    ElevationLocation,
    elevation_type,
    nearest_ground_elevation,
)
from terragine.config import TracerSettings
from terragine.representation.waypoint import Waypoint
from terragine.representation.zone import Plateau, Ramp


SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


@pytest.fixture
def mesa():
    return Plateau("Mesa", SQUARE, plateau_elevation=10)


@pytest.fixture
def ramp_on_mesa():
    return Ramp("Slope", SQUARE, plateau_elevation=20, ramp_floor=12, direction=0, elevation_bottom=10)


class TestElevationType:
    def test_ground_on_scene_floor(self, mesa):
        assert elevation_type(Waypoint(20, 20, 0), [mesa], 0) == ElevationLocation.GROUND

    def test_floating_above_scene_floor(self, mesa):
        assert elevation_type(Waypoint(20, 20, 5), [mesa], 0) == ElevationLocation.FLOATING

    def test_ground_on_plateau(self, mesa):
        assert elevation_type(Waypoint(5, 5, 10), [mesa], 0) == ElevationLocation.GROUND

    def test_underground_inside_plateau(self, mesa):
        assert elevation_type(Waypoint(5, 5, 3), [mesa], 0) == ElevationLocation.UNDERGROUND

    def test_floating_above_plateau(self, mesa):
        assert elevation_type(Waypoint(5, 5, 15), [mesa], 0) == ElevationLocation.FLOATING

    def test_underground_when_off_any_surface(self, mesa, ramp_on_mesa):
        # On the mesa's surface but inside the ramp resting on it.
        point = Waypoint(5, 5, 10)
        assert elevation_type(point, [mesa, ramp_on_mesa], 0) == ElevationLocation.UNDERGROUND

    def test_respects_scene_floor(self):
        assert elevation_type(Waypoint(0, 0, 3), [], 3) == ElevationLocation.GROUND
        assert elevation_type(Waypoint(0, 0, 0), [], 3) == ElevationLocation.FLOATING


class TestNearestGroundElevation:
    def test_floor_stays_on_floor(self, mesa):
        assert nearest_ground_elevation(Waypoint(20, 20, 0), [mesa], 0) == 0

    def test_falls_to_floor_outside_zones(self, mesa):
        assert nearest_ground_elevation(Waypoint(20, 20, 30), [mesa], 0) == 0

    def test_falls_onto_plateau(self, mesa):
        assert nearest_ground_elevation(Waypoint(5, 5, 30), [mesa], 0) == 10

    def test_rises_out_of_plateau(self, mesa):
        assert nearest_ground_elevation(Waypoint(5, 5, 2), [mesa], 0) == 10

    def test_burrowing_stays_inside(self, mesa):
        assert nearest_ground_elevation(Waypoint(5, 5, 2), [mesa], 0, burrowing=True) == 2

    def test_burrowing_still_falls(self, mesa):
        assert nearest_ground_elevation(Waypoint(5, 5, 30), [mesa], 0, burrowing=True) == 10

    def test_stacked_ramp_wins(self, mesa, ramp_on_mesa):
        point = Waypoint(5, 5, 0)
        assert nearest_ground_elevation(point, [mesa, ramp_on_mesa], 0) == pytest.approx(16)

    def test_stacked_ramp_from_above(self, mesa, ramp_on_mesa):
        point = Waypoint(5, 5, 40)
        assert nearest_ground_elevation(point, [mesa, ramp_on_mesa], 0) == pytest.approx(16)

    def test_nearest_of_overlapping_zones(self, mesa):
        high = Plateau("High", [(4, 4), (6, 4), (6, 6), (4, 6)], plateau_elevation=25, elevation_bottom=20)
        assert nearest_ground_elevation(Waypoint(5, 5, 40), [mesa, high], 0) == 25
        assert nearest_ground_elevation(Waypoint(5, 5, 15), [mesa, high], 0) == 10

    def test_equal_falls_keep_input_order(self):
        first = Plateau("First", SQUARE, plateau_elevation=10)
        second = Plateau("Second", SQUARE, plateau_elevation=10)
        assert nearest_ground_elevation(Waypoint(5, 5, 30), [first, second], 0) == 10

    def test_samples_catch_nearby_zone(self, mesa):
        point = Waypoint(11, 5, 30)
        assert nearest_ground_elevation(point, [mesa], 0) == 0
        # Landing happens where the sample lands; the surface is read at the point itself.
        assert nearest_ground_elevation(point, [mesa], 0, samples=[(0, 0), (-2, 0)]) == 10

    @pytest.mark.parametrize(
        "point",
        [Waypoint(20, 20, 0), Waypoint(5, 5, 10)],
    )
    def test_ground_is_idempotent(self, mesa, point):
        assert elevation_type(point, [mesa], 0) == ElevationLocation.GROUND
        assert nearest_ground_elevation(point, [mesa], 0) == point.elevation

    def test_iteration_cap_is_logged(self, caplog):
        class Trampoline(Plateau):
            def __init__(self, name, plateau_elevation, elevation_bottom, bounce_to):
                super().__init__(name, SQUARE, plateau_elevation, elevation_bottom)
                self.bounce_to = bounce_to

            def elevation_upon_entry(self, point):
                return self.bounce_to

        # Each zone throws the point into the other, so the upward search never settles.
        zones = [Trampoline("Low", 10, 0, 20), Trampoline("High", 25, 15, 5)]
        with caplog.at_level(logging.ERROR, logger="terragine"):
            result = nearest_ground_elevation(
                Waypoint(5, 5, 0), zones, 0, settings=TracerSettings(max_iterations=5)
            )
        assert "Max iterations" in caplog.text
        assert result in (5, 20)
