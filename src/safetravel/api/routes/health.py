"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


def _get_police_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.crime.police_client import check_health as police_health_check
    return police_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        osrm_health_check = _get_osrm_health_check()
        return {"service": "osrm", "healthy": osrm_health_check()}
    except Exception as e:
        return {"service": "osrm", "healthy": False, "error": str(e)}


@router.get("/health/police", status_code=status.HTTP_200_OK)
def health_police() -> dict:
    """Check the UK Police crime feed."""
    try:
        police_health_check = _get_police_health_check()
        return {"service": "police", "healthy": police_health_check()}
    except Exception as e:
        return {"service": "police", "healthy": False, "error": str(e)}
