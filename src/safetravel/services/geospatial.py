"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point, Polygon

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0

# Coarse (lat, lon) outline around England, Wales and Northern Ireland. Generous on
# purpose: anything inside still goes to the police feed, which has the final say.
UK_POLICE_COVERAGE: tuple[tuple[float, float], ...] = (
    (49.8, -8.7),
    (49.8, 2.1),
    (56.0, 2.1),
    (56.0, -8.7),
)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return haversine_km(lat1, lon1, lat2, lon2) * 1000.0


def path_length_m(geometry: Sequence[tuple[float, float]]) -> float:
    """Cumulative great-circle length of a [lng, lat] polyline in meters."""

    total = 0.0
    for (lng1, lat1), (lng2, lat2) in zip(geometry, geometry[1:]):
        total += haversine_m(lat1, lng1, lat2, lng2)
    return total


def point_in_polygon(lat: float, lon: float, polygon_coords: Sequence[tuple[float, float]]) -> bool:
    """Return True if the point is inside the polygon denoted by (lat, lon) pairs."""

    polygon = Polygon([(lng, lat) for lat, lng in polygon_coords])
    return polygon.contains(Point(lon, lat))


def within_uk_coverage(lat: float, lon: float) -> bool:
    return point_in_polygon(lat, lon, UK_POLICE_COVERAGE)
