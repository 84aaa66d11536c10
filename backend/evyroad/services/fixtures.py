import logging
from datetime import datetime, timedelta, timezone

from evyroad.models.trip import Location, TripCertification, WeatherConditions
from evyroad.schemas.trip import PhotoCreate, TripCreate, WaypointCreate
from evyroad.services.trip_repository import TripRepository

logger = logging.getLogger(__name__)

DEMO_USER_ID = "demo-user-123"


def seed_demo_trips(repo: TripRepository, user_id: str = DEMO_USER_ID) -> list[str]:
    """
    Load three demo trips (completed, active, planned) through the normal
    repository operations. Returns the new trip ids.
    """
    now = repo.now()
    ids = [
        _seed_blue_ridge(repo, user_id),
        _seed_kansas_crossing(repo, user_id, now),
        _seed_tail_of_the_dragon(repo, user_id, now),
    ]
    logger.info("Seeded %d demo trips for user %s", len(ids), user_id)
    return ids


def _seed_blue_ridge(repo: TripRepository, user_id: str) -> str:
    start = datetime(2024, 10, 15, 8, 0, tzinfo=timezone.utc)
    trip = repo.create(
        user_id,
        TripCreate(
            title="Weekend Blue Ridge Ride",
            description="Beautiful autumn ride through the Blue Ridge Mountains with perfect weather and great company.",
            bike_id="bike-1",
            start_location=Location(lat=35.5951, lng=-82.5515, address="Asheville, NC, USA"),
            end_location=Location(lat=36.1070, lng=-82.1134, address="Mount Mitchell State Park, NC, USA"),
            start_time=start,
            planned_duration=480,
            notes="Perfect weather, amazing fall colors. The climb to Mount Mitchell was challenging but worth it.",
            is_public=True,
            tags=["scenic", "mountains", "autumn", "certified"],
            odometer_start=12450,
        ),
    )
    repo.update(trip.id, {"status": "active", "start_time": start})
    for lat, lng, alt, speed, minutes in [
        (35.5951, -82.5515, 2134, 0, 0),
        (35.7348, -82.2635, 3500, 45, 90),
        (36.1070, -82.1134, 6684, 0, 225),
    ]:
        repo.add_waypoint(
            trip.id,
            WaypointCreate(
                lat=lat, lng=lng, altitude=alt, speed=speed, accuracy=5,
                timestamp=start + timedelta(minutes=minutes),
            ),
        )
    repo.add_photo(
        trip.id,
        PhotoCreate(
            url="/api/photos/sample1.jpg",
            caption="Morning view from Asheville overlook",
            location=Location(lat=35.5951, lng=-82.5515, address="Blue Ridge Parkway Overlook"),
            timestamp=start + timedelta(minutes=30),
        ),
    )
    repo.add_photo(
        trip.id,
        PhotoCreate(
            url="/api/photos/sample2.jpg",
            caption="Summit of Mount Mitchell",
            location=Location(lat=36.1070, lng=-82.1134, address="Mount Mitchell Summit"),
            timestamp=start + timedelta(minutes=225),
        ),
    )
    repo.add_weather(
        trip.id,
        WeatherConditions(
            temperature=68, condition="Partly Cloudy", humidity=45, wind_speed=8,
            wind_direction=225, visibility=10, pressure=29.85, icon="partly-cloudy-day",
            observed_at=start,
        ),
    )
    repo.update(
        trip.id,
        {
            "status": "completed",
            "end_time": start + timedelta(hours=7, minutes=30),
            "odometer_end": 12577,
            "fuel_used": 3.2,
            "fuel_cost": 12.48,
        },
    )
    repo.set_certification(
        trip.id,
        TripCertification(
            route_id="blue-ridge-parkway",
            status="certified",
            reviewed_at=datetime(2024, 10, 16, 10, 0, tzinfo=timezone.utc),
            reviewed_by="system",
            score=95,
            completion_percentage=95,
            certification_level="gold",
        ),
    )
    return trip.id


def _seed_kansas_crossing(repo: TripRepository, user_id: str, now: datetime) -> str:
    start = now - timedelta(hours=2)
    trip = repo.create(
        user_id,
        TripCreate(
            title="Cross-Country Adventure Day 3",
            description="Day 3 of our cross-country ride - heading through Kansas today.",
            bike_id="bike-1",
            start_location=Location(lat=39.0458, lng=-95.6890, address="Lawrence, KS, USA"),
            end_location=Location(lat=39.8283, lng=-98.5795, address="Smith Center, KS, USA"),
            start_time=start,
            planned_duration=360,
            notes="Good weather for riding.",
            is_public=True,
            tags=["cross-country", "adventure", "plains"],
            odometer_start=13892,
        ),
    )
    repo.update(trip.id, {"status": "active", "start_time": start})
    repo.add_waypoint(
        trip.id,
        WaypointCreate(lat=39.0458, lng=-95.6890, altitude=268, speed=0, accuracy=5,
                       timestamp=start),
    )
    repo.add_waypoint(
        trip.id,
        WaypointCreate(lat=39.1836, lng=-96.5717, altitude=329, speed=55, accuracy=8,
                       timestamp=now - timedelta(hours=1)),
    )
    repo.add_photo(
        trip.id,
        PhotoCreate(
            url="/api/photos/sample3.jpg",
            caption="Kansas sunrise - endless highways ahead!",
            location=Location(lat=39.0458, lng=-95.6890, address="Lawrence, KS"),
            timestamp=start + timedelta(minutes=20),
        ),
    )
    return trip.id


def _seed_tail_of_the_dragon(repo: TripRepository, user_id: str, now: datetime) -> str:
    start = now + timedelta(days=2)
    trip = repo.create(
        user_id,
        TripCreate(
            title="Tail of the Dragon Weekend",
            description="Planning to tackle the famous 318 curves at Deals Gap this weekend.",
            start_location=Location(lat=35.5175, lng=-83.9348, address="Deals Gap, TN, USA"),
            end_location=Location(lat=35.5175, lng=-83.9348, address="Deals Gap, TN, USA"),
            start_time=start,
            planned_duration=240,
            planned_route=[WaypointCreate(lat=35.5175, lng=-83.9348, altitude=1988, timestamp=start)],
            notes="Meeting the riding group at 8 AM.",
            tags=["planned", "tail-of-dragon", "weekend", "curves"],
        ),
    )
    return trip.id
