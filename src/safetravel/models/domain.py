"""Domain models for waypoints, routes and crime snapshots."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

# [lng, lat] pair, the order used by GeoJSON and OSRM.
Coordinate = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A caller-supplied point participating in a route."""

    lat: float
    lng: float

    def as_coordinate(self) -> Coordinate:
        return (self.lng, self.lat)


@dataclass(slots=True)
class RouteComputation:
    """Geometry plus physical metrics for one resolved path."""

    geometry: List[Coordinate]
    distance_m: float
    duration_s: float
    is_synthetic: bool
    fallback_reason: Optional[str] = None


@dataclass(slots=True)
class RiskAnnotation:
    """Route-level risk score and how many samples backed it."""

    risk_score: int
    samples_requested: int
    samples_scored: int

    @property
    def reliable(self) -> bool:
        return self.samples_scored > 0


@dataclass(slots=True)
class CrimeIncident:
    """One street-level crime record, with optional fields left as None."""

    category: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_type: Optional[str] = None
    street_name: Optional[str] = None
    month: Optional[str] = None


@dataclass(slots=True)
class CrimeSnapshot:
    """Aggregated incident counts and derived score for one coordinate."""

    total_incidents: int
    by_category: Dict[str, int]
    crime_score: int
    in_coverage: bool = True
    degraded: bool = False


@dataclass(slots=True)
class CrimeReport:
    """Full crime lookup result used by the public crime endpoint."""

    snapshot: CrimeSnapshot
    incidents: List[CrimeIncident] = field(default_factory=list)
    last_updated: Optional[datetime] = None
