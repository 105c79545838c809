import asyncio

import pytest

from safetravel.models.domain import CrimeSnapshot
from safetravel.services.routing.safety import RouteSafetyAnnotator, sample_points_along_route


def _line(count: int):
    return [(-0.1 + i * 0.001, 51.5 + i * 0.001) for i in range(count)]


def _snapshot(score: int, degraded: bool = False) -> CrimeSnapshot:
    return CrimeSnapshot(total_incidents=score, by_category={}, crime_score=score, degraded=degraded)


class DummyCrimeService:
    """Returns scripted results keyed by latitude."""

    def __init__(self, results):
        self.results = results
        self.calls = []

    async def score_at(self, lat, lng):
        self.calls.append((lat, lng))
        result = self.results[round(lat, 3)]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.parametrize(
    "count, num_samples, expected_indices",
    [
        (21, 10, [0, 2, 4, 6, 8, 10, 12, 14, 16, 18]),
        (21, 8, [0, 2, 4, 6, 8, 10, 12, 14]),
        (5, 10, [0, 1, 2, 3, 4]),
        (100, 10, list(range(0, 100, 10))),
    ],
)
def test_sample_points_use_fixed_stride(count, num_samples, expected_indices):
    line = _line(count)
    assert sample_points_along_route(line, num_samples) == [line[i] for i in expected_indices]


def test_sample_points_needs_a_real_path():
    assert sample_points_along_route(_line(1), 10) == []
    assert sample_points_along_route([], 10) == []


def test_annotate_averages_sample_scores():
    line = _line(3)
    service = DummyCrimeService({51.5: _snapshot(10), 51.501: _snapshot(20), 51.502: _snapshot(25)})

    annotation = asyncio.run(RouteSafetyAnnotator(service, max_parallel=2).annotate(line, num_samples=10))

    assert annotation.risk_score == 18
    assert annotation.samples_requested == 3
    assert annotation.samples_scored == 3
    assert annotation.reliable is True
    assert sorted(service.calls) == sorted((lat, lng) for lng, lat in line)


def test_annotate_excludes_failed_and_degraded_samples():
    line = _line(3)
    service = DummyCrimeService(
        {51.5: _snapshot(30), 51.501: RuntimeError("feed exploded"), 51.502: _snapshot(0, degraded=True)}
    )

    annotation = asyncio.run(RouteSafetyAnnotator(service).annotate(line))

    assert annotation.risk_score == 30
    assert annotation.samples_scored == 1


def test_annotate_with_no_usable_samples_scores_zero():
    line = _line(2)
    service = DummyCrimeService({51.5: RuntimeError("down"), 51.501: _snapshot(0, degraded=True)})

    annotation = asyncio.run(RouteSafetyAnnotator(service).annotate(line))

    assert annotation.risk_score == 0
    assert annotation.samples_requested == 2
    assert annotation.reliable is False


def test_annotate_limits_parallel_requests():
    in_flight = 0
    peak = 0

    class SlowCrimeService:
        async def score_at(self, lat, lng):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return _snapshot(10)

    annotation = asyncio.run(RouteSafetyAnnotator(SlowCrimeService(), max_parallel=3).annotate(_line(30), num_samples=10))

    assert annotation.risk_score == 10
    assert annotation.samples_scored == 10
    assert peak <= 3
