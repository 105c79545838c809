"""Application configuration and settings management."""

from typing import Any

import json
import re
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SAFETRAVEL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "SafeTravel Route Safety API"
    api_prefix: str = ""
    log_level: str = Field(default="INFO", description="Root log level for the service.")

    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service.",
    )
    osrm_timeout_seconds: float = Field(default=15.0, gt=0.0)
    osrm_max_retries: int = Field(default=0, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    osrm_user_agent: str = "SafeTravel-App/1.0"

    police_api_base_url: str = Field(
        default="https://data.police.uk/api",
        description="Base URL for the UK Police street-crime API.",
    )
    crime_data_month: str = Field(
        default="2023-01",
        description="Monthly snapshot (YYYY-MM) requested from the police feed.",
    )
    crime_search_radius_m: float = Field(default=2000.0, gt=0.0)
    crime_timeout_seconds: float = Field(default=15.0, gt=0.0)
    crime_max_parallel_requests: int = Field(default=10, ge=1)
    crime_cache_ttl_seconds: float = Field(default=3600.0, ge=0.0)
    crime_cache_max_entries: int = Field(default=1024, ge=1)
    crime_coverage_precheck: bool = Field(
        default=True,
        description="Skip the police feed for points clearly outside UK coverage.",
    )

    route_risk_samples: int = Field(default=10, ge=1)
    fallback_risk_samples: int = Field(default=8, ge=1)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("osrm_base_url", "police_api_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("crime_data_month", mode="after")
    @classmethod
    def _check_month(cls, value: str) -> str:
        if not _MONTH_PATTERN.match(value):
            raise ValueError("crime_data_month must use the YYYY-MM format")
        return value

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()

