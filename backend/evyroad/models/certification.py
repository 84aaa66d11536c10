from typing import Literal

from pydantic import BaseModel, Field

from evyroad.models.trip import CertificationLevel, Location, UtcDatetime

AttemptStatus = Literal["not_started", "in_progress", "pending_review", "certified", "rejected"]


class WaypointVisit(BaseModel):
    waypoint_id: str
    timestamp: UtcDatetime
    location: Location
    distance_m: float
    is_required: bool


class CertificationPhoto(BaseModel):
    url: str
    waypoint_id: str
    location: Location


class AttemptProgress(BaseModel):
    waypoints_completed: int = 0
    total_waypoints: int = 0
    required_waypoints_completed: int = 0
    total_required_waypoints: int = 0
    photos_submitted: int = 0
    required_photos: int = 0
    completion_percentage: float = 0.0

    @property
    def completion_ratio(self) -> float:
        if self.total_waypoints == 0:
            return 0.0
        return self.waypoints_completed / self.total_waypoints


class CertificationAttempt(BaseModel):
    id: str
    user_id: str
    trip_id: str
    route_id: str
    status: AttemptStatus = "not_started"
    started_at: UtcDatetime | None = None
    submitted_at: UtcDatetime | None = None
    reviewed_at: UtcDatetime | None = None
    reviewed_by: str | None = None
    waypoints_visited: list[WaypointVisit] = Field(default_factory=list)
    photos: list[CertificationPhoto] = Field(default_factory=list)
    notes: str | None = None
    progress: AttemptProgress = Field(default_factory=AttemptProgress)
    estimated_level: CertificationLevel | None = None
    level: CertificationLevel | None = None
    score: float | None = None


class ReviewDecision(BaseModel):
    """Outcome handed back by an injected reviewer for a pending attempt."""

    approved: bool
    level: CertificationLevel | None = None
    score: float | None = None
    reviewer: str | None = None


class CheckInResult(BaseModel):
    within_radius: bool
    distance_m: float
    radius_m: float
    visit: WaypointVisit | None = None
