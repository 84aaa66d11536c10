from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so comparisons never mix kinds.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]

TripStatus = Literal["planned", "active", "completed", "cancelled"]
CertificationStatus = Literal["pending", "certified", "rejected"]
CertificationLevel = Literal["bronze", "silver", "gold"]


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str | None = None


class TripWaypoint(BaseModel):
    id: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    timestamp: UtcDatetime
    altitude: float | None = None
    speed: float | None = Field(None, ge=0)
    accuracy: float | None = Field(None, ge=0)


class TripPhoto(BaseModel):
    id: str
    url: str
    caption: str | None = None
    location: Location | None = None
    timestamp: UtcDatetime


class ElevationStats(BaseModel):
    gain: float = 0.0
    loss: float = 0.0
    max: float = 0.0
    min: float = 0.0


class TripMetrics(BaseModel):
    total_distance: float = 0.0  # km
    total_time: float = 0.0  # minutes
    avg_speed: float = 0.0  # km/h
    max_speed: float = 0.0  # km/h
    elevation: ElevationStats | None = None


class WeatherConditions(BaseModel):
    temperature: float
    condition: str
    humidity: float
    wind_speed: float
    wind_direction: float
    visibility: float | None = None
    pressure: float | None = None
    icon: str
    observed_at: UtcDatetime | None = None


class TripCertification(BaseModel):
    route_id: str
    status: CertificationStatus = "pending"
    reviewed_at: UtcDatetime | None = None
    reviewed_by: str | None = None
    score: float | None = None
    completion_percentage: float | None = Field(None, ge=0, le=100)
    certification_level: CertificationLevel | None = None


class Trip(BaseModel):
    id: str
    user_id: str
    bike_id: str | None = None
    title: str
    description: str | None = None
    status: TripStatus = "planned"

    start_location: Location
    end_location: Location | None = None
    waypoints: list[TripWaypoint] = Field(default_factory=list)
    planned_route: list[TripWaypoint] = Field(default_factory=list)

    start_time: UtcDatetime
    end_time: UtcDatetime | None = None
    planned_duration: int | None = Field(None, ge=0)  # minutes

    metrics: TripMetrics = Field(default_factory=TripMetrics)

    photos: list[TripPhoto] = Field(default_factory=list)
    notes: str | None = None
    weather: WeatherConditions | None = None
    weather_history: list[WeatherConditions] = Field(default_factory=list)

    certification: TripCertification | None = None

    is_public: bool = False
    shared_with: list[str] | None = None
    tags: list[str] = Field(default_factory=list)

    odometer_start: float | None = None
    odometer_end: float | None = None
    fuel_used: float | None = None
    fuel_cost: float | None = None

    created_at: UtcDatetime
    updated_at: UtcDatetime

    @property
    def is_certified(self) -> bool:
        return self.certification is not None and self.certification.status == "certified"
