"""Crime lookups and per-point crime scoring."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from ...config import settings
from ...errors import OutOfCoverageError, UpstreamUnavailableError
from ...models.domain import CrimeIncident, CrimeReport, CrimeSnapshot
from ..geospatial import haversine_m, within_uk_coverage
from .cache import SnapshotCache, snapshot_cache_key
from .police_client import PoliceAPIClient
from .scoring import compute_crime_score, count_by_category

logger = logging.getLogger(__name__)


def out_of_coverage_snapshot() -> CrimeSnapshot:
    return CrimeSnapshot(total_incidents=0, by_category={}, crime_score=0, in_coverage=False)


def degraded_snapshot() -> CrimeSnapshot:
    return CrimeSnapshot(total_incidents=0, by_category={}, crime_score=0, degraded=True)


def _parse_month(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def latest_month(incidents: Iterable[CrimeIncident]) -> Optional[datetime]:
    months = [parsed for parsed in (_parse_month(incident.month) for incident in incidents) if parsed]
    return max(months) if months else None


def _within_radius(incident: CrimeIncident, lat: float, lng: float, radius_m: float) -> bool:
    # Records without a usable location were already placed near the point by the feed.
    if incident.latitude is None or incident.longitude is None:
        return True
    return haversine_m(lat, lng, incident.latitude, incident.longitude) <= radius_m


def build_snapshot(incidents: list[CrimeIncident]) -> CrimeSnapshot:
    total = len(incidents)
    return CrimeSnapshot(
        total_incidents=total,
        by_category=count_by_category(incident.category for incident in incidents),
        crime_score=compute_crime_score(total),
    )


class CrimeScoreService:
    """Turns raw police-feed incidents into bounded crime snapshots."""

    def __init__(
        self,
        client: PoliceAPIClient | None = None,
        cache: SnapshotCache | None = None,
        month: str | None = None,
        radius_m: float | None = None,
        coverage_precheck: bool | None = None,
    ) -> None:
        self.client = client or PoliceAPIClient()
        self.cache = cache
        self.month = month or settings.crime_data_month
        self.radius_m = radius_m if radius_m is not None else settings.crime_search_radius_m
        self.coverage_precheck = (
            coverage_precheck if coverage_precheck is not None else settings.crime_coverage_precheck
        )

    async def lookup(self, lat: float, lng: float, radius_m: float | None = None) -> CrimeReport:
        """Full crime report for one point.

        Out-of-coverage points yield an empty report. Feed failures propagate as
        ``UpstreamUnavailableError`` so public callers can report them.
        """
        radius = radius_m if radius_m is not None else self.radius_m
        if self.coverage_precheck and not within_uk_coverage(lat, lng):
            logger.info(f"[{lat}, {lng}] is outside UK police coverage; skipping feed")
            return CrimeReport(snapshot=out_of_coverage_snapshot())

        try:
            incidents = await self.client.street_crimes(lat, lng, self.month)
        except OutOfCoverageError:
            logger.info(f"Police feed has no data for [{lat}, {lng}]; treating as zero crime")
            return CrimeReport(snapshot=out_of_coverage_snapshot())

        nearby = [incident for incident in incidents if _within_radius(incident, lat, lng, radius)]
        snapshot = build_snapshot(nearby)
        logger.info(
            f"Crime score for [{lat}, {lng}]: {snapshot.crime_score} "
            f"(from {snapshot.total_incidents} crimes within {radius:.0f}m)"
        )
        return CrimeReport(snapshot=snapshot, incidents=nearby, last_updated=latest_month(nearby))

    async def score_at(self, lat: float, lng: float) -> CrimeSnapshot:
        """Crime snapshot for one point; never raises for feed problems.

        A failing feed yields a zero snapshot flagged ``degraded`` which is not cached.
        """
        key = snapshot_cache_key(lat, lng, self.month, self.radius_m)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        try:
            report = await self.lookup(lat, lng)
        except UpstreamUnavailableError as exc:
            logger.warning(f"Crime feed unavailable for [{lat}, {lng}]: {exc}")
            return degraded_snapshot()

        if self.cache is not None:
            self.cache.set(key, report.snapshot)
        return report.snapshot
