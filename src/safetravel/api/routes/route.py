"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...errors import InvalidInputError
from ...schemas.routing import RouteRequest, RouteResponse
from ...services.routing.service import RouteService
from ..dependencies import get_route_service

router = APIRouter(prefix="/route", tags=["route"])

logger = logging.getLogger(__name__)


@router.post("", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def calculate_route(payload: RouteRequest, service: RouteService = Depends(get_route_service)):
    """Compute a route between waypoints, with a crime risk score for ``pathType="safest"``."""
    try:
        return await service.calculate_route(payload)
    except InvalidInputError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": str(exc)},
        )
    except Exception as exc:
        logger.exception(f"Error calculating route: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to calculate route", "message": str(exc)},
        )
