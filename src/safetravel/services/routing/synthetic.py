"""Synthetic road-like geometry used when the routing engine is unavailable."""

from __future__ import annotations

import math
from typing import List

from ...models.domain import Coordinate, RouteComputation, Waypoint
from ..geospatial import path_length_m

SYNTHETIC_STEPS = 20

# Nominal travel speeds in m/s.
NOMINAL_SPEEDS = {
    "car": 13.9,
    "foot": 1.4,
    "bike": 4.2,
}

# mode -> (curve frequency, curve amplitude in degrees, oscillation frequency)
CURVE_PROFILES = {
    "car": (1.0, 0.002, 2.0),
    "foot": (1.5, 0.003, 3.0),
    "bike": (1.2, 0.0025, 2.5),
}


def nominal_speed(mode: str) -> float:
    return NOMINAL_SPEEDS.get(mode, NOMINAL_SPEEDS["car"])


def estimate_duration_s(distance_m: float, mode: str) -> float:
    return distance_m / nominal_speed(mode)


def generate_synthetic_geometry(start: Waypoint, end: Waypoint, mode: str, steps: int = SYNTHETIC_STEPS) -> List[Coordinate]:
    """Interpolate ``steps + 1`` points from start to end with a sinusoidal wobble.

    The foot and bike curves do not vanish at t=1, so both ends are pinned to the
    input waypoints afterwards.
    """
    curve_freq, amplitude, oscillation = CURVE_PROFILES.get(mode, CURVE_PROFILES["car"])
    coordinates: List[Coordinate] = []
    for i in range(steps + 1):
        t = i / steps
        lat = start.lat + (end.lat - start.lat) * t
        lng = start.lng + (end.lng - start.lng) * t

        curve = math.sin(t * math.pi * curve_freq) * amplitude
        lat += curve * math.cos(t * math.pi * oscillation)
        lng += curve * math.sin(t * math.pi * oscillation)
        coordinates.append((lng, lat))

    coordinates[0] = start.as_coordinate()
    coordinates[-1] = end.as_coordinate()
    return coordinates


def synthesize_route(waypoints: List[Waypoint], mode: str, reason: str | None = None) -> RouteComputation:
    """Build a fallback route between the first and last waypoint.

    Intermediate waypoints are not visited.
    """
    geometry = generate_synthetic_geometry(waypoints[0], waypoints[-1], mode)
    distance_m = path_length_m(geometry)
    return RouteComputation(
        geometry=geometry,
        distance_m=distance_m,
        duration_s=estimate_duration_s(distance_m, mode),
        is_synthetic=True,
        fallback_reason=reason,
    )
