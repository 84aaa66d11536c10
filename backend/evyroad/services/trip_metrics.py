from datetime import datetime

from evyroad.models.trip import ElevationStats, TripMetrics, TripWaypoint
from evyroad.utils.geo import DistanceUnit, haversine


def compute_trip_metrics(
    waypoints: list[TripWaypoint],
    start_time: datetime,
    end_time: datetime | None,
) -> TripMetrics:
    """
    Derive trip metrics from the recorded waypoints.

    Segment speed is the later waypoint's reported speed when present, else
    segment distance over elapsed hours (pairs with no elapsed time are skipped).
    avg_speed is the plain mean of those segment speeds, not distance / time.
    total_time only depends on the trip start and end timestamps.
    """
    total_time = _elapsed_minutes(start_time, end_time)
    if len(waypoints) < 2:
        return TripMetrics(total_time=total_time)

    total_km = 0.0
    speeds: list[float] = []
    for prev, curr in zip(waypoints, waypoints[1:]):
        seg_km = haversine(prev.lat, prev.lng, curr.lat, curr.lng, DistanceUnit.KILOMETERS)
        total_km += seg_km

        if curr.speed is not None:
            speeds.append(curr.speed)
            continue
        hours = (curr.timestamp - prev.timestamp).total_seconds() / 3600
        if hours > 0:
            speeds.append(seg_km / hours)

    return TripMetrics(
        total_distance=total_km,
        total_time=total_time,
        avg_speed=sum(speeds) / len(speeds) if speeds else 0.0,
        max_speed=max(speeds, default=0.0),
        elevation=compute_elevation_stats(waypoints),
    )


def compute_elevation_stats(waypoints: list[TripWaypoint]) -> ElevationStats | None:
    """Gain/loss between consecutive altitude readings plus the altitude range."""
    altitudes = [wp.altitude for wp in waypoints if wp.altitude is not None]
    if len(altitudes) < 2:
        return None

    gain = 0.0
    loss = 0.0
    for i in range(1, len(waypoints)):
        prev = waypoints[i - 1].altitude
        curr = waypoints[i].altitude
        if prev is not None and curr is not None:
            diff = curr - prev
            if diff > 0:
                gain += diff
            else:
                loss += abs(diff)
    return ElevationStats(
        gain=round(gain, 1),
        loss=round(loss, 1),
        max=max(altitudes),
        min=min(altitudes),
    )


def _elapsed_minutes(start_time: datetime, end_time: datetime | None) -> float:
    if end_time is None:
        return 0.0
    return (end_time - start_time).total_seconds() / 60
