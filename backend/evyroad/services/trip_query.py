from pydantic import BaseModel

from evyroad.models.trip import Trip, TripStatus, UtcDatetime
from evyroad.services.trip_repository import TripRepository


class TripFilters(BaseModel):
    """Search constraints; every field left as None means no constraint."""

    status: TripStatus | None = None
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None
    tags: list[str] | None = None
    bike_id: str | None = None
    is_public: bool | None = None
    has_photos: bool | None = None
    is_certified: bool | None = None
    min_distance: float | None = None
    max_distance: float | None = None
    query: str | None = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


def matches(trip: Trip, filters: TripFilters) -> bool:
    """True when the trip satisfies every supplied filter (tags match any)."""
    if filters.status and trip.status != filters.status:
        return False
    if filters.start_date and trip.start_time < filters.start_date:
        return False
    if filters.end_date and trip.start_time > filters.end_date:
        return False
    if filters.tags and not any(tag in trip.tags for tag in filters.tags):
        return False
    if filters.bike_id and trip.bike_id != filters.bike_id:
        return False
    if filters.is_public is not None and trip.is_public != filters.is_public:
        return False
    if filters.has_photos is not None and (len(trip.photos) > 0) != filters.has_photos:
        return False
    if filters.is_certified is not None and trip.is_certified != filters.is_certified:
        return False
    if filters.min_distance is not None and trip.metrics.total_distance < filters.min_distance:
        return False
    if filters.max_distance is not None and trip.metrics.total_distance > filters.max_distance:
        return False
    if filters.query and not _matches_text(trip, filters.query):
        return False
    return True


def search_trips(repo: TripRepository, user_id: str, filters: TripFilters) -> list[Trip]:
    """All of a user's trips that pass the filters, in insertion order."""
    trips = repo.all_for_user(user_id)
    if filters.is_empty():
        return trips
    return [trip for trip in trips if matches(trip, filters)]


def _matches_text(trip: Trip, query: str) -> bool:
    needle = query.lower()
    if needle in trip.title.lower():
        return True
    if trip.description and needle in trip.description.lower():
        return True
    return any(needle in tag.lower() for tag in trip.tags)

