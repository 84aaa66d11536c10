"""Shared fixtures: fixed clock, fresh repository, catalog, API client."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from evyroad.config import Settings
from evyroad.main import create_app
from evyroad.models.trip import Location
from evyroad.schemas.trip import TripCreate, WaypointCreate
from evyroad.services.certification import CertificationService
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository

CHICAGO = (41.8781, -87.6298)


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def km_north(lat: float, km: float) -> float:
    """Latitude reached by going `km` due north (exact for haversine on a meridian)."""
    return lat + math.degrees(km / 6371.0)


def make_completed_trip(
    repo: TripRepository,
    user_id: str,
    start: datetime,
    distance_km: float = 60.0,
    duration_minutes: int = 90,
    title: str = "Ride",
    **fields,
):
    """Create a trip and ride it to completion along a meridian from Chicago."""
    trip = repo.create(
        user_id,
        TripCreate(title=title, start_location=Location(lat=CHICAGO[0], lng=CHICAGO[1]), start_time=start, **fields),
    )
    repo.update(trip.id, {"status": "active", "start_time": start})
    repo.add_waypoint(trip.id, WaypointCreate(lat=CHICAGO[0], lng=CHICAGO[1], timestamp=start))
    repo.add_waypoint(
        trip.id,
        WaypointCreate(
            lat=km_north(CHICAGO[0], distance_km),
            lng=CHICAGO[1],
            timestamp=start + timedelta(hours=1),
        ),
    )
    return repo.update(trip.id, {"status": "completed", "end_time": start + timedelta(minutes=duration_minutes)})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def repo(clock) -> TripRepository:
    return TripRepository(clock=clock)


@pytest.fixture
def catalog() -> RouteCatalog:
    return RouteCatalog.default()


@pytest.fixture
def certifications(repo, catalog) -> CertificationService:
    return CertificationService(repo, catalog)


@pytest.fixture
def new_trip():
    def _build(title: str = "Lake Shore cruise", **fields) -> TripCreate:
        fields.setdefault("start_location", Location(lat=CHICAGO[0], lng=CHICAGO[1]))
        return TripCreate(title=title, **fields)

    return _build


@pytest.fixture
def client(repo, catalog, certifications) -> TestClient:
    app = create_app(
        settings=Settings(seed_demo_data=False),
        trip_repository=repo,
        route_catalog=catalog,
        certification_service=certifications,
    )
    return TestClient(app)


@pytest.fixture
def rider_headers() -> dict[str, str]:
    return {"X-User-Id": "rider-1"}
