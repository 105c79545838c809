"""HTTP client for the UK Police street-level crime API.

The feed covers England, Wales and Northern Ireland only, serves one monthly
snapshot per request and is rate limited (15 requests/second, 1000/hour per IP).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ...config import settings
from ...errors import CrimeFeedUnavailableError, OutOfCoverageError
from ...models.domain import CrimeIncident

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_incident(raw: dict) -> CrimeIncident:
    """Convert one feed record into a CrimeIncident, tolerating missing fields."""
    location = raw.get("location") or {}
    street = location.get("street") or {}
    return CrimeIncident(
        category=raw.get("category") or "unknown",
        latitude=_as_float(location.get("latitude")),
        longitude=_as_float(location.get("longitude")),
        location_type=raw.get("location_type"),
        street_name=street.get("name"),
        month=raw.get("month"),
    )


class PoliceAPIClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.police_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.crime_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    async def street_crimes(self, lat: float, lng: float, month: str) -> list[CrimeIncident]:
        """Fetch all street-level crimes near a point for one month.

        Raises:
            OutOfCoverageError: the feed answered 404 (outside its coverage).
            CrimeFeedUnavailableError: timeout, transport failure, any other
                non-2xx status or a payload that is not a list of records.
        """
        url = f"{self.base_url}/crimes-street/all-crime"
        params = {"lat": lat, "lng": lng, "date": month}
        try:
            payload = await asyncio.wait_for(self._get_json(url, params), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise CrimeFeedUnavailableError(f"Police API timed out after {self.timeout:.1f}s") from exc

        if not isinstance(payload, list):
            raise CrimeFeedUnavailableError("Police API returned a malformed payload")
        logger.debug(f"Police API returned {len(payload)} records for [{lat}, {lng}] ({month})")
        return [parse_incident(item) for item in payload if isinstance(item, dict)]

    async def _get_json(self, url: str, params: dict) -> Any:
        async with self._get_client() as client:
            try:
                response = await client.get(url, params=params)
            except httpx.TimeoutException as exc:
                raise CrimeFeedUnavailableError(f"Police API timed out: {exc}") from exc
            except httpx.TransportError as exc:
                raise CrimeFeedUnavailableError(f"Failed to reach police API at {self.base_url}: {exc}") from exc

            if response.status_code == 404:
                raise OutOfCoverageError(f"No police data for lat={params['lat']} lng={params['lng']}")
            if not response.is_success:
                raise CrimeFeedUnavailableError(f"Police API error: {response.status_code}")
            try:
                return response.json()
            except ValueError as exc:
                raise CrimeFeedUnavailableError(f"Police API returned invalid JSON: {exc}") from exc


def check_health(base_url: str | None = None) -> bool:
    """Check the police feed by asking when it was last updated."""
    base = (base_url or settings.police_api_base_url).rstrip("/")
    try:
        response = httpx.get(f"{base}/crime-last-updated", timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return isinstance(data, dict) and "date" in data
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
