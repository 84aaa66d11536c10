from pydantic import BaseModel, Field

from evyroad.models.certification import CertificationAttempt, CertificationPhoto, CheckInResult
from evyroad.models.route import PredefinedRoute


class StartCertificationRequest(BaseModel):
    route_id: str = Field(..., min_length=1)
    trip_id: str = Field(..., min_length=1)


class WaypointCheckInRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    waypoint_id: str = Field(..., min_length=1, description="Waypoint id or name")


class SubmitCertificationRequest(BaseModel):
    photos: list[CertificationPhoto] = Field(..., min_length=1)
    notes: str | None = Field(None, max_length=1000)


class StartCertificationResponse(BaseModel):
    attempt: CertificationAttempt
    route: PredefinedRoute


class CheckInResponse(CheckInResult):
    attempt: CertificationAttempt


class RouteSummary(BaseModel):
    id: str
    name: str
    description: str
    difficulty: str
    estimated_distance: float
    estimated_duration: float
    waypoint_count: int
    required_waypoints: int
    scenic_rating: int
    is_available: bool
    rewards: list[str]
