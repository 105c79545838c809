"""FastAPI dependency providers for the routing and crime services."""

from __future__ import annotations

from fastapi import Depends, Request

from ..services.crime.cache import SnapshotCache
from ..services.crime.police_client import PoliceAPIClient
from ..services.crime.service import CrimeScoreService
from ..services.routing.osrm_client import OSRMClient
from ..services.routing.provider import RouteGeometryProvider
from ..services.routing.safety import RouteSafetyAnnotator
from ..services.routing.service import RouteService


def get_snapshot_cache(request: Request) -> SnapshotCache | None:
    return getattr(request.app.state, "crime_cache", None)


def get_osrm_client() -> OSRMClient:
    return OSRMClient()


def get_police_client() -> PoliceAPIClient:
    return PoliceAPIClient()


def get_crime_service(
    client: PoliceAPIClient = Depends(get_police_client),
    cache: SnapshotCache | None = Depends(get_snapshot_cache),
) -> CrimeScoreService:
    return CrimeScoreService(client=client, cache=cache)


def get_route_service(
    osrm: OSRMClient = Depends(get_osrm_client),
    crime_service: CrimeScoreService = Depends(get_crime_service),
) -> RouteService:
    return RouteService(
        provider=RouteGeometryProvider(osrm=osrm),
        annotator=RouteSafetyAnnotator(crime_service),
    )
