"""Routing request/response schemas."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RouteRequest(BaseModel):
    """Incoming route request.

    ``waypoints`` is left loosely typed so that malformed input reaches the
    service's own validation and gets the API's 400 messages. ``mode`` and
    ``pathType`` accept any JSON value; unrecognised ones fall back to car and
    shortest.
    """

    model_config = ConfigDict(populate_by_name=True)

    waypoints: Any = None
    mode: Any = "car"
    path_type: Any = Field(default="shortest", alias="pathType")


class WaypointModel(BaseModel):
    lat: float
    lng: float


class RouteModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    geometry: List[List[float]]
    distance: float = Field(..., ge=0)
    duration: float = Field(..., ge=0)
    risk_score: Optional[int] = Field(default=None, ge=0, le=100, alias="riskScore")
    risk_score_reliable: Optional[bool] = Field(default=None, alias="riskScoreReliable")
    distance_km: str = Field(..., alias="distanceKm")
    duration_min: int = Field(..., alias="durationMin")
    synthetic: bool = False


class RouteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    route: RouteModel
    waypoints: List[WaypointModel]
    mode: Any
    path_type: Any = Field(..., alias="pathType")
    note: str
