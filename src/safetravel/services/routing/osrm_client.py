"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from ...config import settings
from ...errors import OSRMUnavailableError

# Travel mode -> OSRM profile. Unknown modes route as cars.
PROFILE_BY_MODE = {
    "car": "driving",
    "foot": "foot",
    "bike": "cycling",
}
DEFAULT_PROFILE = "driving"

logger = logging.getLogger(__name__)


def profile_for_mode(mode: str) -> str:
    return PROFILE_BY_MODE.get(mode, DEFAULT_PROFILE)


def build_coordinate_string(coordinates: Sequence[tuple[float, float]]) -> str:
    """Render (lat, lon) pairs in the "lon,lat;lon,lat" order OSRM expects."""
    return ";".join(f"{lon},{lat}" for lat, lon in coordinates)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.user_agent = user_agent or settings.osrm_user_agent
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )

    async def route(self, coordinates: Sequence[tuple[float, float]], profile: str = DEFAULT_PROFILE) -> dict:
        """Get route geometry between coordinates using OSRM route endpoint.

        The whole exchange, retries included, is bounded by ``self.timeout``; when the
        deadline passes the in-flight request is cancelled.

        Args:
            coordinates: Sequence of (lat, lon) tuples for the route waypoints
            profile: OSRM profile name (driving, foot, cycling)

        Returns:
            The decoded OSRM response with at least one route.

        Raises:
            OSRMUnavailableError: on timeout, transport failure, non-2xx status,
                a non-"Ok" code or an empty route list.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{profile}/{build_coordinate_string(coordinates)}"
        logger.info(f"Calling OSRM route API: {url}")

        try:
            return await asyncio.wait_for(self._request_route(url, params), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(f"OSRM route request exceeded {self.timeout:.1f}s deadline")
            raise OSRMUnavailableError(f"OSRM request timed out after {self.timeout:.1f}s") from exc

    async def _request_route(self, url: str, params: dict) -> dict:
        async with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise OSRMUnavailableError("OSRM returned a malformed payload")
                    if data.get("code") != "Ok":
                        error_msg = data.get("message", data.get("code", "Unknown OSRM route error"))
                        raise OSRMUnavailableError(f"OSRM route request failed: {error_msg}")
                    if not data.get("routes"):
                        raise OSRMUnavailableError("No routes found from OSRM")
                    logger.info(f"OSRM response received, routes: {len(data['routes'])}")
                    return data
                except httpx.HTTPStatusError as exc:
                    status_code = exc.response.status_code
                    attempt += 1
                    if status_code < 500 or attempt > self.max_retries:
                        raise OSRMUnavailableError(
                            f"OSRM API error: {status_code} - {exc.response.reason_phrase}"
                        ) from exc
                    await asyncio.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise OSRMUnavailableError(f"OSRM request timed out: {exc}") from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    await asyncio.sleep(wait_time)
                except httpx.TransportError as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise OSRMUnavailableError(
                            f"Failed to connect to OSRM service at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                    await asyncio.sleep(wait_time)
                except ValueError as exc:
                    raise OSRMUnavailableError(f"OSRM returned invalid JSON: {exc}") from exc


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by routing between two fixed London points."""
    base = (base_url or settings.osrm_base_url).rstrip("/")
    if not base:
        return False
    try:
        test_coords = "-0.1278,51.5074;-0.0922,51.5155"
        url = f"{base}/route/v1/{DEFAULT_PROFILE}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return data.get("code") == "Ok" and bool(data.get("routes"))
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
