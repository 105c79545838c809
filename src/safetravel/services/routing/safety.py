"""Route risk scoring by sampling crime data along a geometry."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from ...config import settings
from ...models.domain import Coordinate, RiskAnnotation
from ..crime.scoring import clamp, round_half_up
from ..crime.service import CrimeScoreService

logger = logging.getLogger(__name__)


def sample_points_along_route(coordinates: Sequence[Coordinate], num_samples: int = 10) -> List[Coordinate]:
    """Take up to ``num_samples`` points at a fixed index stride, starting at the first point."""
    if len(coordinates) < 2 or num_samples < 1:
        return []
    step = max(1, len(coordinates) // num_samples)
    return list(coordinates[::step])[:num_samples]


class RouteSafetyAnnotator:
    def __init__(self, crime_service: CrimeScoreService, max_parallel: int | None = None) -> None:
        self.crime_service = crime_service
        self.max_parallel = max_parallel or settings.crime_max_parallel_requests

    async def annotate(self, geometry: Sequence[Coordinate], num_samples: int = 10) -> RiskAnnotation:
        """Average the crime scores of sampled points into a 0-100 risk score.

        Samples that raise or come back degraded are left out of the mean. When no
        sample could be scored the risk score is 0 with ``samples_scored == 0``.
        """
        samples = sample_points_along_route(geometry, num_samples)
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def _score(coordinate: Coordinate):
            lng, lat = coordinate
            async with semaphore:
                return await self.crime_service.score_at(lat, lng)

        results = await asyncio.gather(*(_score(point) for point in samples), return_exceptions=True)

        scores: List[int] = []
        for (lng, lat), result in zip(samples, results):
            if isinstance(result, BaseException):
                logger.warning(f"Crime sample at [{lat}, {lng}] failed: {result}")
                continue
            if result.degraded:
                continue
            scores.append(result.crime_score)

        if not scores:
            logger.warning(f"No crime samples could be scored ({len(samples)} attempted)")
            return RiskAnnotation(risk_score=0, samples_requested=len(samples), samples_scored=0)

        risk_score = clamp(round_half_up(sum(scores) / len(scores)), 0, 100)
        logger.info(f"Route risk score: {risk_score}/100 (avg of {len(scores)}/{len(samples)} samples)")
        return RiskAnnotation(risk_score=risk_score, samples_requested=len(samples), samples_scored=len(scores))
