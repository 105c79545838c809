"""Crime lookup response schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

COVERAGE_UK_ONLY = "uk_only"

IN_COVERAGE_MESSAGE = (
    "Data covers England, Wales, and Northern Ireland only. Shows crimes from most recent month available."
)
OUT_OF_COVERAGE_MESSAGE = "Crime data is only available for England, Wales, and Northern Ireland"

LIMITATIONS = [
    "UK coverage only (England, Wales, Northern Ireland)",
    "Data shows single month snapshot (most recent available)",
    "Crime score is simplified calculation",
    "API rate limited: 15 req/sec, 1000 req/hour",
    "Full risk analysis would require historical data aggregation",
]


class CrimeLocationModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_type: Optional[str] = None
    street_name: Optional[str] = None
    risk_level: str = Field(..., alias="riskLevel")


class CrimeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    coverage: str = COVERAGE_UK_ONLY
    message: str
    total: int = Field(..., ge=0)
    by_category: Dict[str, int] = Field(default_factory=dict, alias="byCategory")
    crime_locations: List[CrimeLocationModel] = Field(default_factory=list, alias="crimeLocations")
    crime_score: int = Field(..., ge=0, le=100, alias="crimeScore")
    radius: float
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")
    limitations: List[str] = Field(default_factory=list)


class OutOfCoverageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    coverage: str = COVERAGE_UK_ONLY
    message: str = OUT_OF_COVERAGE_MESSAGE
    total: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict, alias="byCategory")
    crime_score: int = Field(default=0, alias="crimeScore")
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")
