"""Route certification attempts: start, waypoint check-in, submission, review."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from evyroad.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    SeasonallyUnavailableError,
    ValidationFailedError,
)
from evyroad.models.certification import (
    AttemptProgress,
    CertificationAttempt,
    CertificationPhoto,
    CheckInResult,
    ReviewDecision,
    WaypointVisit,
)
from evyroad.models.route import PredefinedRoute
from evyroad.models.trip import Location, TripCertification
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository
from evyroad.utils.geo import DistanceUnit, haversine

logger = logging.getLogger(__name__)

MAX_NOTES_LENGTH = 1000
LEVEL_ORDER = ("gold", "silver", "bronze")

Reviewer = Callable[[CertificationAttempt], ReviewDecision | None]


class CertificationService:
    """
    Tracks certification attempts in memory.

    Attempts move not_started -> in_progress -> pending_review and stop there
    unless a reviewer callable is supplied, which decides certified/rejected.
    """

    def __init__(
        self,
        trips: TripRepository,
        catalog: RouteCatalog,
        reviewer: Reviewer | None = None,
    ) -> None:
        self.trips = trips
        self.catalog = catalog
        self.reviewer = reviewer
        self._attempts: dict[str, CertificationAttempt] = {}

    def start_attempt(self, user_id: str, trip_id: str, route_id: str) -> CertificationAttempt:
        route = self._get_route(route_id)
        trip = self.trips.find_by_id(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        if trip.user_id != user_id:
            raise ForbiddenError("Trip belongs to another rider")
        if trip.status in ("completed", "cancelled"):
            raise InvalidStateError(f"Cannot certify a {trip.status} trip")

        now = self.trips.now()
        if not self.catalog.is_available(route, now.date()):
            raise SeasonallyUnavailableError(
                f"{route.name} is not currently available due to seasonal restrictions"
            )
        for existing in self._attempts.values():
            if existing.trip_id == trip_id and existing.status in ("in_progress", "pending_review"):
                raise InvalidStateError(f"Trip {trip_id} already has an open certification attempt")

        attempt = CertificationAttempt(
            id=f"cert_{uuid.uuid4().hex[:12]}",
            user_id=user_id,
            trip_id=trip_id,
            route_id=route_id,
            status="in_progress",
            started_at=now,
            progress=AttemptProgress(
                total_waypoints=len(route.waypoints),
                total_required_waypoints=len(route.required_waypoints),
                required_photos=route.certification_requirements.required_photos,
            ),
        )
        self._attempts[attempt.id] = attempt
        logger.info("User %s started certification %s on %s", user_id, attempt.id, route_id)
        return attempt.model_copy(deep=True)

    def check_in(
        self,
        user_id: str,
        attempt_id: str,
        lat: float,
        lng: float,
        waypoint_ref: str,
    ) -> CheckInResult:
        attempt = self._get_owned(attempt_id, user_id)
        if attempt.status != "in_progress":
            raise InvalidStateError(f"Cannot check in while attempt is '{attempt.status}'")

        route = self._get_route(attempt.route_id)
        waypoint = route.find_waypoint(waypoint_ref)
        if waypoint is None:
            raise NotFoundError(f"Waypoint {waypoint_ref} not found on {route.name}")

        distance_m = haversine(lat, lng, waypoint.lat, waypoint.lng, DistanceUnit.METERS)
        radius_m = route.check_in_radius_m(waypoint)
        if distance_m > radius_m:
            logger.info(
                "Check-in for %s at %s rejected: %.0fm away (limit %.0fm)",
                attempt_id, waypoint.id, distance_m, radius_m,
            )
            return CheckInResult(within_radius=False, distance_m=distance_m, radius_m=radius_m)

        visit = WaypointVisit(
            waypoint_id=waypoint.id,
            timestamp=self.trips.now(),
            location=Location(lat=lat, lng=lng),
            distance_m=distance_m,
            is_required=waypoint.is_required,
        )
        attempt.waypoints_visited = [
            v for v in attempt.waypoints_visited if v.waypoint_id != waypoint.id
        ] + [visit]
        self._refresh_progress(attempt)
        return CheckInResult(
            within_radius=True, distance_m=distance_m, radius_m=radius_m, visit=visit
        )

    def submit(
        self,
        user_id: str,
        attempt_id: str,
        photos: list[CertificationPhoto],
        notes: str | None = None,
    ) -> CertificationAttempt:
        attempt = self._get_owned(attempt_id, user_id)
        if attempt.status != "in_progress":
            raise InvalidStateError(f"Attempt {attempt_id} is '{attempt.status}' and cannot be submitted")
        if not photos:
            raise ValidationFailedError("At least one photo is required")
        if notes and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationFailedError(f"Notes must be at most {MAX_NOTES_LENGTH} characters")

        route = self._get_route(attempt.route_id)
        for photo in photos:
            if not photo.url:
                raise ValidationFailedError("Photo url is required")
            if route.find_waypoint(photo.waypoint_id) is None:
                raise ValidationFailedError(f"Photo references unknown waypoint {photo.waypoint_id}")

        now = self.trips.now()
        attempt.photos = [p.model_copy(deep=True) for p in photos]
        attempt.notes = notes
        attempt.submitted_at = now
        attempt.status = "pending_review"
        self._refresh_progress(attempt)
        attempt.estimated_level = estimate_level(route, attempt)

        self._mirror_to_trip(
            attempt,
            TripCertification(
                route_id=attempt.route_id,
                status="pending",
                completion_percentage=attempt.progress.completion_percentage,
            ),
        )
        logger.info("Certification %s submitted for review", attempt_id)
        return attempt.model_copy(deep=True)

    def review(
        self,
        attempt_id: str,
        decide: Reviewer | None = None,
    ) -> CertificationAttempt:
        """
        Run the reviewer on a pending attempt. Without a reviewer, or when the
        reviewer returns None, the attempt stays in pending_review.
        """
        attempt = self._get(attempt_id)
        if attempt.status != "pending_review":
            raise InvalidStateError(f"Attempt {attempt_id} is '{attempt.status}', not pending review")

        decide = decide or self.reviewer
        if decide is None:
            return attempt.model_copy(deep=True)
        decision = decide(attempt.model_copy(deep=True))
        if decision is None:
            return attempt.model_copy(deep=True)

        now = self.trips.now()
        attempt.reviewed_at = now
        attempt.reviewed_by = decision.reviewer
        attempt.score = decision.score
        if decision.approved:
            attempt.status = "certified"
            attempt.level = decision.level or attempt.estimated_level or "bronze"
        else:
            attempt.status = "rejected"

        self._mirror_to_trip(
            attempt,
            TripCertification(
                route_id=attempt.route_id,
                status="certified" if decision.approved else "rejected",
                reviewed_at=now,
                reviewed_by=decision.reviewer,
                score=decision.score,
                completion_percentage=attempt.progress.completion_percentage,
                certification_level=attempt.level,
            ),
        )
        logger.info("Certification %s reviewed: %s", attempt_id, attempt.status)
        return attempt.model_copy(deep=True)

    def get(self, attempt_id: str, user_id: str) -> CertificationAttempt:
        return self._get_owned(attempt_id, user_id).model_copy(deep=True)

    def list_for_user(self, user_id: str) -> list[CertificationAttempt]:
        return [a.model_copy(deep=True) for a in self._attempts.values() if a.user_id == user_id]

    def _get(self, attempt_id: str) -> CertificationAttempt:
        attempt = self._attempts.get(attempt_id)
        if attempt is None:
            raise NotFoundError(f"Certification {attempt_id} not found")
        return attempt

    def _get_owned(self, attempt_id: str, user_id: str) -> CertificationAttempt:
        attempt = self._get(attempt_id)
        if attempt.user_id != user_id:
            raise ForbiddenError("Certification belongs to another rider")
        return attempt

    def _get_route(self, route_id: str) -> PredefinedRoute:
        route = self.catalog.get(route_id)
        if route is None:
            raise NotFoundError(f"Route {route_id} not found")
        return route

    def _mirror_to_trip(self, attempt: CertificationAttempt, record: TripCertification) -> None:
        try:
            self.trips.set_certification(attempt.trip_id, record)
        except NotFoundError:
            logger.warning("Trip %s for certification %s no longer exists", attempt.trip_id, attempt.id)

    @staticmethod
    def _refresh_progress(attempt: CertificationAttempt) -> None:
        progress = attempt.progress
        progress.waypoints_completed = len(attempt.waypoints_visited)
        progress.required_waypoints_completed = sum(1 for v in attempt.waypoints_visited if v.is_required)
        progress.photos_submitted = len(attempt.photos)
        progress.completion_percentage = round(progress.completion_ratio * 100, 1)


def estimate_level(route: PredefinedRoute, attempt: CertificationAttempt) -> str | None:
    """Best reward tier the submitted evidence would qualify for, if any."""
    ratio = attempt.progress.completion_ratio
    photos = attempt.progress.photos_submitted
    if route.rewards is None:
        minimum = route.certification_requirements.minimum_completion_percentage / 100
        return "bronze" if ratio >= minimum else None

    elapsed_s = None
    if attempt.started_at and attempt.submitted_at:
        elapsed_s = (attempt.submitted_at - attempt.started_at).total_seconds()
    for level in LEVEL_ORDER:
        tier = getattr(route.rewards, level)
        if ratio < tier.min_completion:
            continue
        if tier.required_photos is not None and photos < tier.required_photos:
            continue
        if tier.max_time_s is not None and elapsed_s is not None and elapsed_s > tier.max_time_s:
            continue
        return level
    return None
