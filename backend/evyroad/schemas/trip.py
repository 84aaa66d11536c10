from typing import Literal

from pydantic import BaseModel, Field

from evyroad.models.trip import (
    Location,
    Trip,
    TripCertification,
    TripStatus,
    UtcDatetime,
)

SortBy = Literal["start_time", "created_at", "title"]
SortOrder = Literal["asc", "desc"]


class WaypointCreate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    timestamp: UtcDatetime | None = None
    altitude: float | None = None
    speed: float | None = Field(None, ge=0, description="Reported speed in km/h")
    accuracy: float | None = Field(None, ge=0, description="GPS accuracy in meters")


class PhotoCreate(BaseModel):
    url: str = Field(..., min_length=1)
    caption: str | None = Field(None, max_length=500)
    location: Location | None = None
    timestamp: UtcDatetime | None = None


class TripCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    bike_id: str | None = None
    start_location: Location
    end_location: Location | None = None
    start_time: UtcDatetime | None = None
    planned_duration: int | None = Field(None, ge=0, description="Minutes")
    planned_route: list[WaypointCreate] = Field(default_factory=list)
    notes: str | None = None
    is_public: bool = False
    shared_with: list[str] | None = None
    tags: list[str] = Field(default_factory=list)
    odometer_start: float | None = None
    fuel_used: float | None = None
    fuel_cost: float | None = None


class TripUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    bike_id: str | None = None
    status: TripStatus | None = None
    start_location: Location | None = None
    end_location: Location | None = None
    start_time: UtcDatetime | None = None
    end_time: UtcDatetime | None = None
    planned_duration: int | None = Field(None, ge=0)
    notes: str | None = None
    is_public: bool | None = None
    shared_with: list[str] | None = None
    tags: list[str] | None = None
    odometer_start: float | None = None
    odometer_end: float | None = None
    fuel_used: float | None = None
    fuel_cost: float | None = None


class CertificationUpdate(BaseModel):
    certification: TripCertification | None = None


class TripListResponse(BaseModel):
    trips: list[Trip]
    total: int
    limit: int
    offset: int


class TripPathResponse(BaseModel):
    trip_id: str
    point_count: int
    distance_km: float
    polyline: str
    geojson: dict
