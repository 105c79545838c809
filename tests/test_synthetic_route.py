import pytest

from safetravel.models.domain import Waypoint
from safetravel.services.geospatial import haversine_m
from safetravel.services.routing.synthetic import (
    NOMINAL_SPEEDS,
    SYNTHETIC_STEPS,
    generate_synthetic_geometry,
    synthesize_route,
)

LONDON_START = Waypoint(lat=51.5074, lng=-0.1278)
LONDON_END = Waypoint(lat=51.5155, lng=-0.0922)


@pytest.mark.parametrize("mode", ["car", "foot", "bike", "hovercraft"])
def test_synthetic_geometry_pins_both_ends(mode):
    geometry = generate_synthetic_geometry(LONDON_START, LONDON_END, mode)

    assert len(geometry) == SYNTHETIC_STEPS + 1
    assert geometry[0] == (LONDON_START.lng, LONDON_START.lat)
    assert geometry[-1] == (LONDON_END.lng, LONDON_END.lat)


def test_synthetic_geometry_curves_away_from_straight_line():
    geometry = generate_synthetic_geometry(LONDON_START, LONDON_END, "car")
    midpoint_lng, midpoint_lat = geometry[SYNTHETIC_STEPS // 2]

    straight_lat = (LONDON_START.lat + LONDON_END.lat) / 2
    straight_lng = (LONDON_START.lng + LONDON_END.lng) / 2
    # At t=0.5 the car curve is sin(pi/2) * 0.002 applied as (cos(pi), sin(pi)).
    assert midpoint_lat == pytest.approx(straight_lat - 0.002)
    assert midpoint_lng == pytest.approx(straight_lng, abs=1e-12)


def test_foot_paths_wiggle_more_than_car_paths():
    car = generate_synthetic_geometry(LONDON_START, LONDON_END, "car")
    foot = generate_synthetic_geometry(LONDON_START, LONDON_END, "foot")
    assert car != foot


def test_unknown_mode_uses_car_semantics():
    car = synthesize_route([LONDON_START, LONDON_END], "car")
    other = synthesize_route([LONDON_START, LONDON_END], "segway")

    assert other.geometry == car.geometry
    assert other.duration_s == pytest.approx(car.duration_s)


@pytest.mark.parametrize("mode", ["car", "foot", "bike"])
def test_synthetic_route_metrics_follow_nominal_speed(mode):
    computation = synthesize_route([LONDON_START, LONDON_END], mode, reason="test")

    straight = haversine_m(LONDON_START.lat, LONDON_START.lng, LONDON_END.lat, LONDON_END.lng)
    assert computation.is_synthetic is True
    assert computation.fallback_reason == "test"
    assert computation.distance_m >= straight
    assert computation.duration_s == pytest.approx(computation.distance_m / NOMINAL_SPEEDS[mode])


def test_synthetic_route_ignores_intermediate_waypoints():
    detour = Waypoint(lat=52.2053, lng=0.1218)
    direct = synthesize_route([LONDON_START, LONDON_END], "car")
    via = synthesize_route([LONDON_START, detour, LONDON_END], "car")

    assert via.geometry == direct.geometry
    assert via.distance_m == pytest.approx(direct.distance_m)
