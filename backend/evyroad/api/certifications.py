from fastapi import APIRouter, Depends

from evyroad.api.deps import get_certification_service, get_current_user_id
from evyroad.models.certification import CertificationAttempt
from evyroad.schemas.certification import (
    CheckInResponse,
    StartCertificationRequest,
    StartCertificationResponse,
    SubmitCertificationRequest,
    WaypointCheckInRequest,
)
from evyroad.services.certification import CertificationService

router = APIRouter(prefix="/certifications", tags=["certifications"])


@router.post("/start", response_model=StartCertificationResponse, status_code=201)
def start_certification(
    req: StartCertificationRequest,
    user_id: str = Depends(get_current_user_id),
    service: CertificationService = Depends(get_certification_service),
):
    attempt = service.start_attempt(user_id, req.trip_id, req.route_id)
    return StartCertificationResponse(attempt=attempt, route=service.catalog.get(req.route_id))


@router.get("", response_model=list[CertificationAttempt])
def list_certifications(
    user_id: str = Depends(get_current_user_id),
    service: CertificationService = Depends(get_certification_service),
):
    return service.list_for_user(user_id)


@router.get("/{certification_id}", response_model=CertificationAttempt)
def get_certification(
    certification_id: str,
    user_id: str = Depends(get_current_user_id),
    service: CertificationService = Depends(get_certification_service),
):
    return service.get(certification_id, user_id)


@router.post("/{certification_id}/waypoint", response_model=CheckInResponse)
def check_in(
    certification_id: str,
    req: WaypointCheckInRequest,
    user_id: str = Depends(get_current_user_id),
    service: CertificationService = Depends(get_certification_service),
):
    result = service.check_in(user_id, certification_id, req.lat, req.lng, req.waypoint_id)
    return CheckInResponse(
        **result.model_dump(),
        attempt=service.get(certification_id, user_id),
    )


@router.post("/{certification_id}/submit", response_model=CertificationAttempt)
def submit_certification(
    certification_id: str,
    req: SubmitCertificationRequest,
    user_id: str = Depends(get_current_user_id),
    service: CertificationService = Depends(get_certification_service),
):
    return service.submit(user_id, certification_id, req.photos, req.notes)
