import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from evyroad.api import certifications, routes, trips
from evyroad.config import Settings, settings as default_settings
from evyroad.errors import EvyRoadError
from evyroad.services.certification import CertificationService
from evyroad.services.fixtures import seed_demo_trips
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


async def handle_service_error(request: Request, exc: EvyRoadError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    trip_repository: TripRepository | None = None,
    route_catalog: RouteCatalog | None = None,
    certification_service: CertificationService | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version=settings.version)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", settings.user_id_header],
    )

    if trip_repository is None:
        trip_repository = TripRepository()
    if route_catalog is None:
        route_catalog = RouteCatalog.default()
    if certification_service is None:
        certification_service = CertificationService(trip_repository, route_catalog)
    app.state.trips = trip_repository
    app.state.routes = route_catalog
    app.state.certifications = certification_service
    if settings.seed_demo_data and trip_repository.count() == 0:
        seed_demo_trips(trip_repository)

    app.add_exception_handler(EvyRoadError, handle_service_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    for module in (trips, routes, certifications):
        app.include_router(module.router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "version": settings.version,
            "trips": app.state.trips.count(),
        }

    logger.info("%s ready (%d routes)", settings.app_name, len(route_catalog))
    return app


app = create_app()


def run() -> None:
    """Serve the module-level app with uvicorn on the configured host and port."""
    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
