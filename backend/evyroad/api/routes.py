from fastapi import APIRouter, Depends

from evyroad.api.deps import get_route_catalog, get_trip_repository
from evyroad.errors import NotFoundError
from evyroad.models.route import PredefinedRoute
from evyroad.schemas.certification import RouteSummary
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("", response_model=list[RouteSummary])
def list_routes(
    catalog: RouteCatalog = Depends(get_route_catalog),
    repo: TripRepository = Depends(get_trip_repository),
):
    today = repo.now().date()
    return [
        RouteSummary(
            id=route.id,
            name=route.name,
            description=route.description,
            difficulty=route.difficulty,
            estimated_distance=route.estimated_distance,
            estimated_duration=route.estimated_duration,
            waypoint_count=len(route.waypoints),
            required_waypoints=len(route.required_waypoints),
            scenic_rating=route.scenic_rating,
            is_available=catalog.is_available(route, today),
            rewards=list(route.rewards.model_dump()) if route.rewards else [],
        )
        for route in catalog.list_routes()
    ]


@router.get("/{route_id}", response_model=PredefinedRoute)
def get_route(route_id: str, catalog: RouteCatalog = Depends(get_route_catalog)):
    route = catalog.get(route_id)
    if not route:
        raise NotFoundError(f"Route {route_id} not found")
    return route
