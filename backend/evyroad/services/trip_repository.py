"""In-memory trip store with a per-user index."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from evyroad.errors import InvalidStateError, NotFoundError, ValidationFailedError
from evyroad.models.trip import (
    Trip,
    TripCertification,
    TripPhoto,
    TripStatus,
    TripWaypoint,
    WeatherConditions,
)
from evyroad.schemas.trip import PhotoCreate, TripCreate, WaypointCreate
from evyroad.services.trip_metrics import compute_trip_metrics

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
SORT_FIELDS = ("start_time", "created_at", "title")

# Fields callers can never write through update(). Collections and the
# certification record only change through their own operations.
PROTECTED_FIELDS = frozenset({
    "id", "user_id", "created_at", "updated_at", "metrics",
    "waypoints", "photos", "weather", "weather_history", "certification",
})

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "planned": {"active", "cancelled"},
    "active": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class TripRepository:
    """
    Keyed store of trips plus a user id -> ordered trip ids index.

    Records handed out are copies; every mutation goes through this class so
    metrics and updated_at stay consistent.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._trips: dict[str, Trip] = {}
        self._user_trips: dict[str, list[str]] = {}

    def now(self) -> datetime:
        return self._clock()

    # ── CRUD ────────────────────────────────────────────

    def create(self, user_id: str, data: TripCreate) -> Trip:
        now = self._clock()
        start_time = data.start_time or now
        payload = data.model_dump(exclude={"planned_route", "start_time"})
        trip = Trip(
            **payload,
            id=_new_id(),
            user_id=user_id,
            status="planned",
            start_time=start_time,
            planned_route=[self._make_waypoint(wp, now) for wp in data.planned_route],
            created_at=now,
            updated_at=now,
        )
        trip.metrics = compute_trip_metrics(trip.waypoints, trip.start_time, trip.end_time)

        self._trips[trip.id] = trip
        self._user_trips.setdefault(user_id, []).append(trip.id)
        logger.info("Created trip %s for user %s", trip.id, user_id)
        return trip.model_copy(deep=True)

    def find_by_id(self, trip_id: str) -> Trip | None:
        trip = self._trips.get(trip_id)
        return trip.model_copy(deep=True) if trip else None

    def find_by_user_id(
        self,
        user_id: str,
        status: TripStatus | None = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        sort_by: str = "start_time",
        sort_order: str = "desc",
    ) -> list[Trip]:
        trips = self.all_for_user(user_id)
        if status:
            trips = [t for t in trips if t.status == status]
        trips = sort_trips(trips, sort_by, sort_order)
        return trips[offset : offset + limit]

    def all_for_user(self, user_id: str) -> list[Trip]:
        """Every trip of a user in insertion order, unsorted and unpaginated."""
        ids = self._user_trips.get(user_id, [])
        return [self._trips[i].model_copy(deep=True) for i in ids if i in self._trips]

    def update(self, trip_id: str, changes: Mapping[str, Any]) -> Trip:
        trip = self._get(trip_id)
        now = self._clock()
        updates = {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}

        new_status = updates.get("status")
        if new_status is not None and new_status != trip.status:
            allowed = ALLOWED_TRANSITIONS.get(trip.status, set())
            if new_status not in allowed:
                raise InvalidStateError(
                    f"Cannot move trip from '{trip.status}' to '{new_status}'"
                )
            if new_status == "active" and updates.get("start_time") is None:
                updates["start_time"] = now
            if new_status == "completed" and updates.get("end_time") is None:
                updates["end_time"] = now

        data = trip.model_dump()
        data.update(updates)
        data["updated_at"] = now
        try:
            updated = Trip.model_validate(data)
        except ValidationError as e:
            raise ValidationFailedError(f"Invalid trip update: {e.errors()[0]['msg']}") from e
        if updated.end_time is not None and updated.end_time < updated.start_time:
            raise ValidationFailedError("end_time must not be before start_time")

        updated.metrics = compute_trip_metrics(updated.waypoints, updated.start_time, updated.end_time)
        self._trips[trip_id] = updated
        if new_status is not None and new_status != trip.status:
            logger.info("Trip %s moved %s -> %s", trip_id, trip.status, new_status)
        return updated.model_copy(deep=True)

    def delete(self, trip_id: str) -> bool:
        trip = self._trips.pop(trip_id, None)
        if trip is None:
            return False
        ids = self._user_trips.get(trip.user_id, [])
        self._user_trips[trip.user_id] = [i for i in ids if i != trip_id]
        logger.info("Deleted trip %s", trip_id)
        return True

    # ── Appends ─────────────────────────────────────────

    def add_waypoint(self, trip_id: str, data: WaypointCreate) -> TripWaypoint:
        trip = self._get(trip_id)
        if trip.status != "active":
            raise InvalidStateError(
                f"Waypoints can only be added to active trips (trip is '{trip.status}')"
            )
        now = self._clock()
        waypoint = self._make_waypoint(data, now)
        trip.waypoints.append(waypoint)
        trip.metrics = compute_trip_metrics(trip.waypoints, trip.start_time, trip.end_time)
        trip.updated_at = now
        logger.debug("Trip %s: waypoint %d recorded", trip_id, len(trip.waypoints))
        return waypoint.model_copy(deep=True)

    def add_photo(self, trip_id: str, data: PhotoCreate) -> TripPhoto:
        trip = self._get(trip_id)
        now = self._clock()
        photo = TripPhoto(
            id=_new_id(),
            url=data.url,
            caption=data.caption,
            location=data.location,
            timestamp=data.timestamp or now,
        )
        trip.photos.append(photo)
        trip.updated_at = now
        return photo.model_copy(deep=True)

    def add_weather(self, trip_id: str, snapshot: WeatherConditions) -> Trip:
        trip = self._get(trip_id)
        now = self._clock()
        if snapshot.observed_at is None:
            snapshot = snapshot.model_copy(update={"observed_at": now})
        trip.weather_history.append(snapshot)
        trip.weather = snapshot
        trip.updated_at = now
        return trip.model_copy(deep=True)

    def set_certification(self, trip_id: str, certification: TripCertification | None) -> Trip:
        trip = self._get(trip_id)
        trip.certification = certification.model_copy(deep=True) if certification else None
        trip.updated_at = self._clock()
        return trip.model_copy(deep=True)

    # ── Housekeeping ────────────────────────────────────

    def count(self) -> int:
        return len(self._trips)

    def clear(self) -> None:
        self._trips.clear()
        self._user_trips.clear()

    def _get(self, trip_id: str) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return trip

    @staticmethod
    def _make_waypoint(data: WaypointCreate, now: datetime) -> TripWaypoint:
        return TripWaypoint(
            id=_new_id(),
            lat=data.lat,
            lng=data.lng,
            timestamp=data.timestamp or now,
            altitude=data.altitude,
            speed=data.speed,
            accuracy=data.accuracy,
        )


def sort_trips(trips: list[Trip], sort_by: str = "start_time", sort_order: str = "desc") -> list[Trip]:
    """Stable sort on one of SORT_FIELDS; equal keys keep their input order."""
    if sort_by not in SORT_FIELDS:
        raise ValidationFailedError(f"Cannot sort trips by '{sort_by}'")
    if sort_order not in ("asc", "desc"):
        raise ValidationFailedError(f"Unknown sort order '{sort_order}'")
    return sorted(trips, key=lambda t: getattr(t, sort_by), reverse=sort_order == "desc")
