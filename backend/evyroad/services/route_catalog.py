import logging
from datetime import date
from typing import Iterable

from evyroad.models.route import PredefinedRoute

logger = logging.getLogger(__name__)

DEFAULT_ROUTES: list[dict] = [
    {
        "id": "route-66-classic",
        "name": "Route 66 - Chicago to Santa Monica",
        "description": "The classic cross-country motorcycle journey",
        "difficulty": "intermediate",
        "estimated_duration": 40,
        "estimated_distance": 2448,
        "start_location": {"lat": 41.8781, "lng": -87.6298, "name": "Chicago, IL"},
        "end_location": {"lat": 34.0522, "lng": -118.2437, "name": "Santa Monica, CA"},
        "waypoints": [
            {"id": "wp-chicago", "name": "Chicago, IL", "lat": 41.8781, "lng": -87.6298, "order": 1},
            {"id": "wp-amarillo", "name": "Amarillo, TX", "lat": 35.2271, "lng": -101.8313, "order": 2},
            {"id": "wp-kingman", "name": "Kingman, AZ", "lat": 35.1983, "lng": -114.0572, "order": 3},
            {"id": "wp-santa-monica", "name": "Santa Monica, CA", "lat": 34.0522, "lng": -118.2437, "order": 4},
        ],
        "scenic_rating": 4,
        "seasonality": {"best_months": [4, 5, 6, 9, 10], "warnings": ["Desert heat in July and August"]},
        "certification_requirements": {
            "minimum_completion_percentage": 85,
            "required_waypoints": 4,
            "max_deviation_radius_m": 100,
            "min_time_spent_s": 7200,
            "required_photos": 2,
        },
        "rewards": {
            "bronze": {"min_completion": 0.85, "badge": "Route 66 Explorer"},
            "silver": {"min_completion": 0.95, "badge": "Route 66 Navigator", "required_photos": 3},
            "gold": {"min_completion": 1.0, "badge": "Route 66 Master", "required_photos": 5, "max_time_s": 604800},
        },
    },
    {
        "id": "beartooth-pass",
        "name": "Beartooth Pass Highway",
        "description": "Scenic mountain highway through Montana and Wyoming",
        "difficulty": "advanced",
        "estimated_duration": 3,
        "estimated_distance": 68,
        "start_location": {"lat": 45.0167, "lng": -109.2667, "name": "Red Lodge, MT"},
        "end_location": {"lat": 44.9167, "lng": -110.1167, "name": "Cooke City, MT"},
        "waypoints": [
            {"id": "wp-red-lodge", "name": "Red Lodge, MT", "lat": 45.0167, "lng": -109.2667, "order": 1},
            {"id": "wp-beartooth-summit", "name": "Beartooth Pass Summit", "lat": 45.0033, "lng": -109.4667, "order": 2},
            {"id": "wp-cooke-city", "name": "Cooke City, MT", "lat": 44.9167, "lng": -110.1167, "order": 3},
        ],
        "scenic_rating": 5,
        "seasonality": {"best_months": [6, 7, 8, 9], "warnings": ["Closed in winter", "Weather can change rapidly"]},
        "seasonal_window": {"open": {"month": 5, "day": 15}, "close": {"month": 10, "day": 15}},
        "certification_requirements": {
            "minimum_completion_percentage": 90,
            "required_waypoints": 3,
            "max_deviation_radius_m": 50,
            "min_time_spent_s": 3600,
            "required_photos": 1,
        },
        "rewards": {
            "bronze": {"min_completion": 0.90, "badge": "Beartooth Explorer"},
            "silver": {"min_completion": 0.95, "badge": "Mountain Navigator"},
            "gold": {"min_completion": 1.0, "badge": "High Alpine Master", "required_photos": 3},
        },
    },
    {
        "id": "blue-ridge-parkway",
        "name": "Blue Ridge Parkway",
        "description": "America's most scenic motorcycle ride",
        "difficulty": "beginner",
        "estimated_duration": 12,
        "estimated_distance": 469,
        "start_location": {"lat": 36.4767, "lng": -81.8092, "name": "Virginia/North Carolina Border"},
        "end_location": {"lat": 35.2709, "lng": -83.2085, "name": "Great Smoky Mountains"},
        "waypoints": [
            {"id": "wp-va-nc-border", "name": "Virginia/North Carolina Border", "lat": 36.4767, "lng": -81.8092, "order": 1},
            {"id": "wp-mount-mitchell", "name": "Mount Mitchell", "lat": 36.1070, "lng": -82.1134, "order": 2, "is_required": False},
            {"id": "wp-asheville", "name": "Asheville, NC", "lat": 35.5951, "lng": -82.5515, "order": 3},
            {"id": "wp-smokies", "name": "Great Smoky Mountains", "lat": 35.2709, "lng": -83.2085, "order": 4},
        ],
        "scenic_rating": 5,
        "seasonality": {"best_months": [5, 6, 9, 10], "warnings": ["Sections close for snow and ice"]},
        "certification_requirements": {
            "minimum_completion_percentage": 80,
            "required_waypoints": 3,
            "max_deviation_radius_m": 200,
            "min_time_spent_s": 14400,
            "required_photos": 2,
        },
        "rewards": {
            "bronze": {"min_completion": 0.80, "badge": "Blue Ridge Explorer"},
            "silver": {"min_completion": 0.90, "badge": "Scenic Highway Navigator"},
            "gold": {"min_completion": 1.0, "badge": "Appalachian Master", "required_photos": 4},
        },
    },
    {
        "id": "route-55",
        "name": "Historic Route 55",
        "description": "Classic American highway from Chicago to New Orleans",
        "difficulty": "moderate",
        "estimated_duration": 20,
        "estimated_distance": 926,
        "start_location": {"lat": 41.8781, "lng": -87.6298, "name": "Chicago, IL"},
        "end_location": {"lat": 29.9511, "lng": -90.0715, "name": "New Orleans, LA"},
        "waypoints": [
            {"id": "wp-stlouis", "name": "St. Louis, MO", "lat": 38.6270, "lng": -90.1994, "order": 1, "tolerance_m": 1000},
            {"id": "wp-memphis", "name": "Memphis, TN", "lat": 35.1495, "lng": -90.0490, "order": 2, "tolerance_m": 1000},
        ],
        "scenic_rating": 4,
        "seasonality": {"best_months": [4, 5, 6, 9, 10], "warnings": ["Summer heat in the south", "Winter weather in Illinois"]},
        "certification_requirements": {
            "minimum_completion_percentage": 85,
            "required_waypoints": 2,
            "time_limit_hours": 72,
            "max_deviation_radius_m": 1000,
        },
    },
    {
        "id": "beartooth-highway",
        "name": "Beartooth Highway",
        "description": "Scenic mountain highway through Montana and Wyoming",
        "difficulty": "challenging",
        "estimated_duration": 6,
        "estimated_distance": 212,
        "start_location": {"lat": 45.0379, "lng": -109.3535, "name": "Red Lodge, MT"},
        "end_location": {"lat": 44.9778, "lng": -110.1010, "name": "Cooke City, MT"},
        "waypoints": [
            {"id": "wp-beartooth-pass", "name": "Beartooth Pass", "lat": 45.1663, "lng": -109.5532, "order": 1, "tolerance_m": 500},
        ],
        "scenic_rating": 5,
        "seasonality": {"best_months": [6, 7, 8, 9], "warnings": ["Closed in winter", "Weather can change rapidly"]},
        "seasonal_window": {"open": {"month": 5, "day": 15}, "close": {"month": 10, "day": 15}},
        "certification_requirements": {
            "minimum_completion_percentage": 90,
            "required_waypoints": 1,
            "time_limit_hours": 12,
            "max_deviation_radius_m": 500,
        },
    },
    {
        "id": "pacific-coast-highway",
        "name": "Pacific Coast Highway",
        "description": "Iconic coastal route from San Francisco to Los Angeles",
        "difficulty": "moderate",
        "estimated_duration": 12,
        "estimated_distance": 655,
        "start_location": {"lat": 37.7749, "lng": -122.4194, "name": "San Francisco, CA"},
        "end_location": {"lat": 34.0522, "lng": -118.2437, "name": "Los Angeles, CA"},
        "waypoints": [
            {"id": "wp-monterey", "name": "Monterey, CA", "lat": 36.5517, "lng": -121.9233, "order": 1, "tolerance_m": 2000},
            {"id": "wp-paso-robles", "name": "Paso Robles, CA", "lat": 35.6870, "lng": -121.3229, "order": 2, "tolerance_m": 2000},
        ],
        "scenic_rating": 5,
        "seasonality": {"best_months": [4, 5, 6, 7, 8, 9, 10], "warnings": ["Fog in summer", "Landslides possible"]},
        "certification_requirements": {
            "minimum_completion_percentage": 80,
            "required_waypoints": 2,
            "time_limit_hours": 36,
            "max_deviation_radius_m": 2000,
        },
    },
]


class RouteCatalog:
    """Read-only set of predefined routes, keyed by id in load order."""

    def __init__(self, routes: Iterable[PredefinedRoute]) -> None:
        self._routes: dict[str, PredefinedRoute] = {}
        for route in routes:
            if route.id in self._routes:
                raise ValueError(f"Duplicate route id {route.id}")
            self._routes[route.id] = route

    @classmethod
    def default(cls) -> "RouteCatalog":
        catalog = cls(PredefinedRoute.model_validate(r) for r in DEFAULT_ROUTES)
        logger.info("Loaded %d predefined routes", len(catalog))
        return catalog

    def list_routes(self) -> list[PredefinedRoute]:
        return list(self._routes.values())

    def get(self, route_id: str) -> PredefinedRoute | None:
        return self._routes.get(route_id)

    def __len__(self) -> int:
        return len(self._routes)

    @staticmethod
    def is_available(route: PredefinedRoute, on: date) -> bool:
        if route.seasonal_window is None:
            return True
        return route.seasonal_window.contains(on)
