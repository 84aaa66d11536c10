import logging
from datetime import datetime

import polyline as polyline_codec
from fastapi import APIRouter, Depends, Query

from evyroad.api.deps import (
    get_current_user_id,
    get_route_catalog,
    get_trip_repository,
)
from evyroad.config import settings
from evyroad.errors import ForbiddenError, NotFoundError
from evyroad.models.trip import Trip, TripPhoto, TripStatus, TripWaypoint, WeatherConditions
from evyroad.schemas.stats import UserStats
from evyroad.schemas.trip import (
    CertificationUpdate,
    PhotoCreate,
    SortBy,
    SortOrder,
    TripCreate,
    TripListResponse,
    TripPathResponse,
    TripUpdate,
    WaypointCreate,
)
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_query import TripFilters, search_trips
from evyroad.services.trip_repository import TripRepository, sort_trips
from evyroad.services.trip_stats import compute_user_stats
from evyroad.utils.geo import path_distance, to_lnglat

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def get_owned_trip(repo: TripRepository, trip_id: str, user_id: str) -> Trip:
    trip = repo.find_by_id(trip_id)
    if trip is None:
        raise NotFoundError(f"Trip {trip_id} not found")
    if trip.user_id != user_id:
        raise ForbiddenError("You do not have access to this trip")
    return trip


def can_view(trip: Trip, user_id: str) -> bool:
    return trip.user_id == user_id or trip.is_public or user_id in (trip.shared_with or [])


@router.post("", response_model=Trip, status_code=201)
def create_trip(
    req: TripCreate,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    return repo.create(user_id, req)


@router.get("", response_model=TripListResponse)
def list_trips(
    status: TripStatus | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    tags: list[str] | None = Query(None),
    bike_id: str | None = None,
    is_public: bool | None = None,
    has_photos: bool | None = None,
    is_certified: bool | None = None,
    min_distance: float | None = Query(None, ge=0),
    max_distance: float | None = Query(None, ge=0),
    q: str | None = Query(None, description="Matches title, description or tags"),
    sort_by: SortBy = "start_time",
    sort_order: SortOrder = "desc",
    limit: int = Query(settings.default_page_limit, ge=1, le=settings.max_page_limit),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    filters = TripFilters(
        status=status,
        start_date=start_date,
        end_date=end_date,
        tags=tags,
        bike_id=bike_id,
        is_public=is_public,
        has_photos=has_photos,
        is_certified=is_certified,
        min_distance=min_distance,
        max_distance=max_distance,
        query=q,
    )
    # Filtered and unfiltered listings share the same sort and pagination.
    trips = sort_trips(search_trips(repo, user_id, filters), sort_by, sort_order)
    return TripListResponse(
        trips=trips[offset : offset + limit],
        total=len(trips),
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=UserStats)
def trip_stats(
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
    catalog: RouteCatalog = Depends(get_route_catalog),
):
    return compute_user_stats(repo, user_id, catalog)


@router.get("/{trip_id}", response_model=Trip)
def get_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    trip = repo.find_by_id(trip_id)
    if trip is None:
        raise NotFoundError(f"Trip {trip_id} not found")
    if not can_view(trip, user_id):
        raise ForbiddenError("You do not have access to this trip")
    return trip


@router.get("/{trip_id}/path", response_model=TripPathResponse)
def get_trip_path(
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    trip = get_trip(trip_id, user_id, repo)
    points = [(wp.lat, wp.lng) for wp in trip.waypoints]
    return TripPathResponse(
        trip_id=trip.id,
        point_count=len(points),
        distance_km=round(path_distance(points), 2),
        polyline=polyline_codec.encode(points),
        geojson={"type": "LineString", "coordinates": to_lnglat(points)},
    )


@router.patch("/{trip_id}", response_model=Trip)
def update_trip(
    trip_id: str,
    req: TripUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    return repo.update(trip_id, req.model_dump(exclude_unset=True))


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    repo.delete(trip_id)
    return {"ok": True}


@router.post("/{trip_id}/waypoints", response_model=TripWaypoint, status_code=201)
def add_waypoint(
    trip_id: str,
    req: WaypointCreate,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    return repo.add_waypoint(trip_id, req)


@router.post("/{trip_id}/photos", response_model=TripPhoto, status_code=201)
def add_photo(
    trip_id: str,
    req: PhotoCreate,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    return repo.add_photo(trip_id, req)


@router.post("/{trip_id}/weather", response_model=Trip)
def add_weather(
    trip_id: str,
    req: WeatherConditions,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    return repo.add_weather(trip_id, req)


@router.put("/{trip_id}/certification", response_model=Trip)
def set_certification(
    trip_id: str,
    req: CertificationUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: TripRepository = Depends(get_trip_repository),
):
    get_owned_trip(repo, trip_id, user_id)
    logger.info("Trip %s certification overwritten by %s", trip_id, user_id)
    return repo.set_certification(trip_id, req.certification)
