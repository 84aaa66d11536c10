from collections import Counter

from evyroad.schemas.stats import EarnedCertification, MonthlyStats, UserStats, YearlyStats
from evyroad.services.route_catalog import RouteCatalog
from evyroad.services.trip_repository import TripRepository

MAX_FAVORITE_ROUTES = 5


def compute_user_stats(
    repo: TripRepository,
    user_id: str,
    catalog: RouteCatalog | None = None,
) -> UserStats:
    """
    Aggregate a user's trips.

    Distance and time totals, the longest trip and the yearly/monthly buckets
    only count completed trips. Photo and trip counts cover every status.
    """
    trips = repo.all_for_user(user_id)
    completed = [t for t in trips if t.status == "completed"]
    certified = [t for t in trips if t.is_certified]

    total_distance = sum(t.metrics.total_distance for t in completed)
    total_time = sum(t.metrics.total_time for t in completed)

    yearly: dict[int, YearlyStats] = {}
    monthly: dict[str, MonthlyStats] = {}
    for trip in completed:
        year = trip.start_time.year
        month = f"{year}-{trip.start_time.month:02d}"

        year_bucket = yearly.setdefault(year, YearlyStats(year=year))
        year_bucket.trips += 1
        year_bucket.distance += trip.metrics.total_distance
        year_bucket.duration += trip.metrics.total_time

        month_bucket = monthly.setdefault(month, MonthlyStats(month=month))
        month_bucket.trips += 1
        month_bucket.distance += trip.metrics.total_distance
        month_bucket.duration += trip.metrics.total_time

    certifications = []
    route_counts: Counter[str] = Counter()
    for trip in certified:
        cert = trip.certification
        route = catalog.get(cert.route_id) if catalog is not None else None
        certifications.append(
            EarnedCertification(
                route_id=cert.route_id,
                route_name=route.name if route else None,
                level=cert.certification_level or "bronze",
                earned_at=cert.reviewed_at or trip.end_time or trip.created_at,
            )
        )
        route_counts[cert.route_id] += 1

    # most_common keeps first-seen order for equal counts
    favorite_routes = [route_id for route_id, _ in route_counts.most_common(MAX_FAVORITE_ROUTES)]

    return UserStats(
        total_trips=len(trips),
        completed_trips=len(completed),
        total_distance=total_distance,
        total_time=total_time,
        avg_trip_distance=total_distance / len(completed) if completed else 0.0,
        certified_routes=len(certified),
        longest_trip=max((t.metrics.total_distance for t in completed), default=0.0),
        total_photos=sum(len(t.photos) for t in trips),
        yearly_stats=sorted(yearly.values(), key=lambda s: s.year, reverse=True),
        monthly_stats=sorted(monthly.values(), key=lambda s: s.month, reverse=True),
        certifications=certifications,
        favorite_routes=favorite_routes,
    )
