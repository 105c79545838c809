"""Route geometry resolution with a synthetic fallback."""

from __future__ import annotations

import logging
from typing import List, Sequence

from ...errors import OSRMUnavailableError
from ...models.domain import Coordinate, RouteComputation, Waypoint
from .osrm_client import OSRMClient, profile_for_mode
from .synthetic import synthesize_route

logger = logging.getLogger(__name__)


def _parse_osrm_route(data: dict) -> RouteComputation:
    try:
        route = data["routes"][0]
        raw_coordinates = route["geometry"]["coordinates"]
        geometry: List[Coordinate] = [(float(lng), float(lat)) for lng, lat, *_ in raw_coordinates]
        distance_m = float(route["distance"])
        duration_s = float(route["duration"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise OSRMUnavailableError(f"OSRM route payload is malformed: {exc}") from exc

    if len(geometry) < 2:
        raise OSRMUnavailableError(f"OSRM geometry has {len(geometry)} point(s)")
    if distance_m < 0 or duration_s < 0:
        raise OSRMUnavailableError("OSRM returned a negative distance or duration")
    return RouteComputation(
        geometry=geometry,
        distance_m=distance_m,
        duration_s=duration_s,
        is_synthetic=False,
    )


class RouteGeometryProvider:
    """Resolve a travelable path, preferring OSRM and never raising upstream errors."""

    def __init__(self, osrm: OSRMClient | None = None) -> None:
        self.osrm = osrm or OSRMClient()

    async def compute_route(self, waypoints: Sequence[Waypoint], mode: str) -> RouteComputation:
        waypoints = list(waypoints)
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required to compute a route.")

        profile = profile_for_mode(mode)
        try:
            data = await self.osrm.route([(wp.lat, wp.lng) for wp in waypoints], profile=profile)
            computation = _parse_osrm_route(data)
        except OSRMUnavailableError as exc:
            logger.warning(f"OSRM unavailable ({exc}); using synthetic fallback route")
            return synthesize_route(waypoints, mode, reason=str(exc))
        except Exception as exc:
            logger.exception(f"Unexpected OSRM client failure; using synthetic fallback route: {exc}")
            return synthesize_route(waypoints, mode, reason=f"unexpected error: {exc}")

        logger.info(
            f"OSRM route found: {len(computation.geometry)} coordinates, "
            f"{computation.distance_m:.0f}m, {computation.duration_s:.0f}s"
        )
        return computation
