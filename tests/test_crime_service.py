import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from safetravel.errors import CrimeFeedUnavailableError
from safetravel.services.crime.cache import TTLSnapshotCache, snapshot_cache_key
from safetravel.services.crime.police_client import PoliceAPIClient, parse_incident
from safetravel.services.crime.service import CrimeScoreService

LONDON = (51.5074, -0.1278)
NEW_YORK = (40.7128, -74.0060)


def _record(category: str, lat: float, lng: float, month: str = "2023-01", street: str = "On or near High Street") -> dict:
    return {
        "category": category,
        "location_type": "Force",
        "location": {
            "latitude": str(lat),
            "longitude": str(lng),
            "street": {"id": 1, "name": street},
        },
        "month": month,
    }


def _service(handler, **kwargs) -> CrimeScoreService:
    client = PoliceAPIClient(base_url="http://police.test/api", transport=httpx.MockTransport(handler))
    kwargs.setdefault("month", "2023-01")
    return CrimeScoreService(client=client, **kwargs)


def test_parse_incident_tolerates_missing_location():
    incident = parse_incident({"category": "drugs", "location": None, "month": "2023-01"})

    assert incident.category == "drugs"
    assert incident.latitude is None
    assert incident.street_name is None


def test_lookup_aggregates_incidents_near_point():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        records = [_record("drugs", *LONDON) for _ in range(30)]
        records += [_record("theft", *LONDON, month="2022-12") for _ in range(20)]
        # ~3.3 km north: outside the default 2 km radius.
        records.append(_record("burglary", LONDON[0] + 0.03, LONDON[1]))
        return httpx.Response(200, json=records)

    report = asyncio.run(_service(handler).lookup(*LONDON))

    assert report.snapshot.total_incidents == 50
    assert report.snapshot.by_category == {"drugs": 30, "theft": 20}
    assert report.snapshot.crime_score == 13
    assert report.last_updated == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert len(report.incidents) == 50

    request = requests[0]
    assert request.url.path == "/api/crimes-street/all-crime"
    assert request.url.params["date"] == "2023-01"
    assert float(request.url.params["lat"]) == LONDON[0]


def test_lookup_radius_override_widens_search():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_record("burglary", LONDON[0] + 0.03, LONDON[1])])

    report = asyncio.run(_service(handler).lookup(*LONDON, radius_m=5000))

    assert report.snapshot.total_incidents == 1
    assert report.snapshot.crime_score == 5


def test_lookup_outside_coverage_skips_feed():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    report = asyncio.run(_service(handler).lookup(*NEW_YORK))

    assert calls == []
    assert report.snapshot.in_coverage is False
    assert report.snapshot.total_incidents == 0
    assert report.snapshot.crime_score == 0


def test_feed_404_is_zero_crime_not_error():
    service = _service(lambda request: httpx.Response(404), coverage_precheck=False)

    report = asyncio.run(service.lookup(*NEW_YORK))

    assert report.snapshot.in_coverage is False
    assert report.snapshot.crime_score == 0
    assert report.last_updated is None


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(503, text="Too many crimes"),
        httpx.Response(200, json={"unexpected": "object"}),
        httpx.Response(200, text="<html>"),
    ],
)
def test_lookup_surfaces_feed_failures(response):
    with pytest.raises(CrimeFeedUnavailableError):
        asyncio.run(_service(lambda request: response).lookup(*LONDON))


def test_score_at_degrades_instead_of_raising():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    cache = TTLSnapshotCache(maxsize=16, ttl=60)
    snapshot = asyncio.run(_service(handler, cache=cache).score_at(*LONDON))

    assert snapshot.degraded is True
    assert snapshot.crime_score == 0
    assert len(cache) == 0


def test_score_at_times_out_as_degraded():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=[])

    client = PoliceAPIClient(base_url="http://police.test/api", timeout=0.2, transport=httpx.MockTransport(handler))
    snapshot = asyncio.run(CrimeScoreService(client=client).score_at(*LONDON))

    assert snapshot.degraded is True


def test_score_at_uses_cache():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[_record("drugs", *LONDON) for _ in range(200)])

    cache = TTLSnapshotCache(maxsize=16, ttl=60)
    service = _service(handler, cache=cache)

    first = asyncio.run(service.score_at(*LONDON))
    second = asyncio.run(service.score_at(*LONDON))

    assert len(calls) == 1
    assert first.crime_score == second.crime_score == 23
    key = snapshot_cache_key(*LONDON, "2023-01", service.radius_m)
    assert cache.get(key) is first

    cache.expire(key)
    asyncio.run(service.score_at(*LONDON))
    assert len(calls) == 2


def test_cache_expire_without_key_clears_every_entry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[_record("drugs", *LONDON)])

    cache = TTLSnapshotCache(maxsize=16, ttl=60)
    service = _service(handler, cache=cache)
    asyncio.run(service.score_at(*LONDON))
    asyncio.run(service.score_at(LONDON[0] + 0.01, LONDON[1]))
    assert len(cache) == 2

    cache.expire()

    assert len(cache) == 0
    asyncio.run(service.score_at(*LONDON))
    assert len(calls) == 3
