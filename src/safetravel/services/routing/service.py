"""Routing orchestration service."""

from __future__ import annotations

import logging
import math
from typing import Any, List

from ...config import settings
from ...errors import InvalidInputError
from ...models.domain import RiskAnnotation, RouteComputation, Waypoint
from ...schemas.routing import RouteModel, RouteRequest, RouteResponse, WaypointModel
from ..crime.scoring import round_half_up
from .provider import RouteGeometryProvider
from .safety import RouteSafetyAnnotator

logger = logging.getLogger(__name__)

PATH_SHORTEST = "shortest"
PATH_SAFEST = "safest"

TOO_FEW_WAYPOINTS = "At least 2 waypoints are required"
MISSING_COORDINATES = "Each waypoint must have lat and lng"
OUT_OF_RANGE = "Waypoint coordinates are out of range"

# (is_synthetic, path type) -> note returned with the route.
ROUTE_NOTES = {
    (False, PATH_SHORTEST): "Route calculated via OSRM with real road network data.",
    (False, PATH_SAFEST): (
        "Risk score calculated by sampling crime data along route. "
        "Full safest-route requires graph reweighting (out of scope)."
    ),
    (True, PATH_SHORTEST): "Enhanced fallback: Realistic route simulation (OSRM unavailable).",
    (True, PATH_SAFEST): "Enhanced fallback: Safest route calculated using real crime data sampling.",
}
UNSCORED_SUFFIX = " Crime data was unavailable for every sampled point, so the risk score is not reliable."


def _coordinate(value: Any) -> float:
    # bool is an int subclass; JSON true/false is not a coordinate.
    if value is None or isinstance(value, bool):
        raise InvalidInputError(MISSING_COORDINATES)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(MISSING_COORDINATES) from exc
    if not math.isfinite(number):
        raise InvalidInputError(MISSING_COORDINATES)
    return number


def parse_waypoints(raw: Any) -> List[Waypoint]:
    """Validate raw request waypoints into immutable Waypoint records."""
    if not isinstance(raw, list) or len(raw) < 2:
        raise InvalidInputError(TOO_FEW_WAYPOINTS)

    waypoints: List[Waypoint] = []
    for item in raw:
        if not isinstance(item, dict) or "lat" not in item or "lng" not in item:
            raise InvalidInputError(MISSING_COORDINATES)
        lat, lng = _coordinate(item["lat"]), _coordinate(item["lng"])
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise InvalidInputError(OUT_OF_RANGE)
        waypoints.append(Waypoint(lat=lat, lng=lng))
    return waypoints


def resolve_mode(raw: Any) -> str:
    """Travel mode used for routing; anything but a non-empty string means car."""
    if isinstance(raw, str) and raw:
        return raw
    return "car"


def resolve_path_type(raw: Any) -> str:
    return PATH_SAFEST if raw == PATH_SAFEST else PATH_SHORTEST


def _build_route_model(computation: RouteComputation, annotation: RiskAnnotation | None) -> RouteModel:
    return RouteModel(
        geometry=[[lng, lat] for lng, lat in computation.geometry],
        distance=computation.distance_m,
        duration=computation.duration_s,
        risk_score=annotation.risk_score if annotation else None,
        risk_score_reliable=annotation.reliable if annotation else None,
        distance_km=f"{computation.distance_m / 1000:.2f}",
        duration_min=round_half_up(computation.duration_s / 60),
        synthetic=computation.is_synthetic,
    )


class RouteService:
    """Validates a route request, resolves its geometry and optionally scores it."""

    def __init__(self, provider: RouteGeometryProvider, annotator: RouteSafetyAnnotator) -> None:
        self.provider = provider
        self.annotator = annotator

    async def calculate_route(self, payload: RouteRequest) -> RouteResponse:
        """Resolve and optionally score a route.

        Routing never fails the request: OSRM problems fall back to a synthetic
        path. ``mode`` and ``pathType`` are echoed as the caller sent them, while
        unrecognised values behave as car and shortest.

        For safest routes ``riskScore`` is the mean crime score of the sampled
        points. When no sample could be scored it is 0, which is
        indistinguishable from a crime-free route, so ``riskScoreReliable`` is
        false and the note says the score is not reliable. Consumers should check
        the flag before treating 0 as safe.

        Raises:
            InvalidInputError: if the waypoints are missing, malformed or out of range.
        """
        waypoints = parse_waypoints(payload.waypoints)
        mode = resolve_mode(payload.mode)
        path_type = resolve_path_type(payload.path_type)

        computation = await self.provider.compute_route(waypoints, mode)
        if computation.is_synthetic:
            logger.info(f"Using synthetic fallback route ({computation.fallback_reason})")
        else:
            logger.info("Using OSRM route")

        annotation: RiskAnnotation | None = None
        if path_type == PATH_SAFEST:
            num_samples = settings.fallback_risk_samples if computation.is_synthetic else settings.route_risk_samples
            annotation = await self.annotator.annotate(computation.geometry, num_samples=num_samples)

        note = ROUTE_NOTES[(computation.is_synthetic, path_type)]
        if annotation is not None and not annotation.reliable:
            note += UNSCORED_SUFFIX

        return RouteResponse(
            route=_build_route_model(computation, annotation),
            waypoints=[WaypointModel(lat=wp.lat, lng=wp.lng) for wp in waypoints],
            mode="car" if payload.mode is None else payload.mode,
            path_type=PATH_SHORTEST if payload.path_type is None else payload.path_type,
            note=note,
        )
