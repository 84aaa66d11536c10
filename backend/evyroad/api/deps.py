from fastapi import HTTPException, Request

from evyroad.config import settings
from evyroad.services.certification import CertificationService
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository


def get_trip_repository(request: Request) -> TripRepository:
    return request.app.state.trips


def get_route_catalog(request: Request) -> RouteCatalog:
    return request.app.state.routes


def get_certification_service(request: Request) -> CertificationService:
    return request.app.state.certifications


def get_current_user_id(request: Request) -> str:
    """Acting rider id, set by the upstream authentication layer."""
    user_id = request.headers.get(settings.user_id_header, "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Authorization required")
    return user_id
