"""Crime lookup endpoints (UK Police street-level data)."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ...config import settings
from ...models.domain import CrimeReport
from ...schemas.crime import (
    IN_COVERAGE_MESSAGE,
    LIMITATIONS,
    CrimeLocationModel,
    CrimeResponse,
    OutOfCoverageResponse,
)
from ...services.crime.scoring import category_risk_level
from ...services.crime.service import CrimeScoreService
from ..dependencies import get_crime_service

router = APIRouter(prefix="/crime", tags=["crime"])

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def _parse_float(value: Optional[str]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _iso_timestamp(value: datetime | None) -> str | None:
    # Matches the millisecond "Z" form JavaScript clients already parse.
    return value.strftime("%Y-%m-%dT%H:%M:%S.000Z") if value else None


def _to_response(report: CrimeReport, radius: float) -> CrimeResponse | OutOfCoverageResponse:
    snapshot = report.snapshot
    if not snapshot.in_coverage:
        return OutOfCoverageResponse()
    return CrimeResponse(
        message=IN_COVERAGE_MESSAGE,
        total=snapshot.total_incidents,
        by_category=snapshot.by_category,
        crime_locations=[
            CrimeLocationModel(
                category=incident.category,
                latitude=incident.latitude,
                longitude=incident.longitude,
                location_type=incident.location_type,
                street_name=incident.street_name,
                risk_level=category_risk_level(incident.category),
            )
            for incident in report.incidents
        ],
        crime_score=snapshot.crime_score,
        radius=radius,
        last_updated=_iso_timestamp(report.last_updated),
        limitations=list(LIMITATIONS),
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=None)
async def crime_statistics(
    lat: Optional[str] = Query(default=None, description="Latitude of the point of interest"),
    lng: Optional[str] = Query(default=None, description="Longitude of the point of interest"),
    radius: Optional[str] = Query(default=None, description="Search radius in meters"),
    service: CrimeScoreService = Depends(get_crime_service),
):
    """Crime statistics around a point. Only England, Wales and Northern Ireland have data."""
    if not lat or not lng:
        return _error(status.HTTP_400_BAD_REQUEST, "Latitude and longitude are required")

    latitude, longitude = _parse_float(lat), _parse_float(lng)
    if latitude is None or longitude is None or not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid latitude or longitude")

    search_radius = settings.crime_search_radius_m if radius in (None, "") else _parse_float(radius)
    if search_radius is None or search_radius <= 0:
        return _error(status.HTTP_400_BAD_REQUEST, "Radius must be a positive number of meters")

    try:
        report = await service.lookup(latitude, longitude, radius_m=search_radius)
    except Exception as exc:
        logger.exception(f"Error fetching crime data: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch crime data", str(exc))
    return _to_response(report, search_radius).model_dump(by_alias=True)
