from datetime import datetime

from pydantic import BaseModel, Field


class YearlyStats(BaseModel):
    year: int
    trips: int = 0
    distance: float = 0.0
    duration: float = 0.0


class MonthlyStats(BaseModel):
    month: str  # YYYY-MM
    trips: int = 0
    distance: float = 0.0
    duration: float = 0.0


class EarnedCertification(BaseModel):
    route_id: str
    route_name: str | None = None
    level: str
    earned_at: datetime


class UserStats(BaseModel):
    total_trips: int = 0
    completed_trips: int = 0
    total_distance: float = 0.0
    total_time: float = 0.0
    avg_trip_distance: float = 0.0
    certified_routes: int = 0
    longest_trip: float = 0.0
    total_photos: int = 0
    yearly_stats: list[YearlyStats] = Field(default_factory=list)
    monthly_stats: list[MonthlyStats] = Field(default_factory=list)
    certifications: list[EarnedCertification] = Field(default_factory=list)
    favorite_routes: list[str] = Field(default_factory=list)
