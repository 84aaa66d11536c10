from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Difficulty = Literal[
    "beginner", "easy", "intermediate", "moderate", "challenging", "advanced", "expert"
]


class NamedLocation(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str


class RouteWaypoint(BaseModel):
    id: str
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    order: int
    is_required: bool = True
    tolerance_m: float | None = Field(None, gt=0)


class MonthDay(BaseModel):
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)

    def key(self) -> tuple[int, int]:
        return (self.month, self.day)


class SeasonalWindow(BaseModel):
    """Yearly open/close window, both ends inclusive. May wrap the new year."""

    open: MonthDay
    close: MonthDay

    def contains(self, day: date) -> bool:
        current = (day.month, day.day)
        if self.open.key() <= self.close.key():
            return self.open.key() <= current <= self.close.key()
        return current >= self.open.key() or current <= self.close.key()


class Seasonality(BaseModel):
    best_months: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CertificationRequirements(BaseModel):
    minimum_completion_percentage: float = Field(..., ge=0, le=100)
    required_waypoints: int = Field(..., ge=0)
    time_limit_hours: float | None = None
    max_deviation_radius_m: float = Field(100.0, gt=0)
    min_time_spent_s: int = 0
    required_photos: int = 0


class RewardTier(BaseModel):
    min_completion: float = Field(..., ge=0, le=1)
    badge: str
    required_photos: int | None = None
    max_time_s: int | None = None


class RouteRewards(BaseModel):
    bronze: RewardTier
    silver: RewardTier
    gold: RewardTier


class PredefinedRoute(BaseModel):
    id: str
    name: str
    description: str
    difficulty: Difficulty
    estimated_duration: float  # hours
    estimated_distance: float  # miles
    start_location: NamedLocation
    end_location: NamedLocation
    waypoints: list[RouteWaypoint]
    scenic_rating: int = Field(..., ge=1, le=5)
    seasonality: Seasonality = Field(default_factory=Seasonality)
    seasonal_window: SeasonalWindow | None = None
    certification_requirements: CertificationRequirements
    rewards: RouteRewards | None = None

    model_config = {"frozen": True}

    @property
    def required_waypoints(self) -> list[RouteWaypoint]:
        return [wp for wp in self.waypoints if wp.is_required]

    def find_waypoint(self, ref: str) -> RouteWaypoint | None:
        """Look a waypoint up by id, falling back to a case-insensitive name match."""
        for wp in self.waypoints:
            if wp.id == ref:
                return wp
        lowered = ref.lower()
        for wp in self.waypoints:
            if wp.name.lower() == lowered:
                return wp
        return None

    def check_in_radius_m(self, waypoint: RouteWaypoint) -> float:
        if waypoint.tolerance_m is not None:
            return waypoint.tolerance_m
        return self.certification_requirements.max_deviation_radius_m
