"""Tests for derived trip metrics."""

from datetime import datetime, timedelta, timezone

import pytest

from evyroad.models.trip import TripWaypoint
from evyroad.services.trip_metrics import compute_elevation_stats, compute_trip_metrics
from evyroad.utils.geo import haversine

from conftest import km_north

T0 = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


def wp(lat, lng, minutes, **kw) -> TripWaypoint:
    return TripWaypoint(id=f"wp-{minutes}", lat=lat, lng=lng, timestamp=T0 + timedelta(minutes=minutes), **kw)


def test_fewer_than_two_waypoints_is_all_zero():
    for waypoints in ([], [wp(41.0, -87.0, 0, speed=50)]):
        metrics = compute_trip_metrics(waypoints, T0, None)
        assert metrics.total_distance == 0
        assert metrics.total_time == 0
        assert metrics.avg_speed == 0
        assert metrics.max_speed == 0
        assert metrics.elevation is None


def test_total_time_kept_for_finished_trip_with_few_waypoints():
    """Distance and speeds stay zero, but total_time still spans start to end."""
    end = T0 + timedelta(minutes=30)
    for waypoints in ([], [wp(41.0, -87.0, 0, speed=50, altitude=200)]):
        metrics = compute_trip_metrics(waypoints, T0, end)
        assert metrics.total_time == pytest.approx(30)
        assert metrics.total_distance == 0
        assert metrics.avg_speed == 0
        assert metrics.max_speed == 0
        assert metrics.elevation is None


def test_derived_speed_from_timestamps():
    waypoints = [wp(41.8781, -87.6298, 0), wp(km_north(41.8781, 60), -87.6298, 60)]
    metrics = compute_trip_metrics(waypoints, T0, None)
    assert metrics.total_distance == pytest.approx(60)
    assert metrics.avg_speed == pytest.approx(60)
    assert metrics.max_speed == pytest.approx(60)
    assert metrics.total_time == 0


def test_reported_speed_wins_over_derived():
    waypoints = [wp(41.0, -87.0, 0), wp(km_north(41.0, 30), -87.0, 60, speed=80)]
    metrics = compute_trip_metrics(waypoints, T0, None)
    assert metrics.avg_speed == 80
    assert metrics.max_speed == 80


def test_average_is_mean_of_segment_speeds():
    # 10 km in 30 min (20 km/h), then 90 km in 60 min (90 km/h)
    lat1 = km_north(41.0, 10)
    lat2 = km_north(lat1, 90)
    waypoints = [wp(41.0, -87.0, 0), wp(lat1, -87.0, 30), wp(lat2, -87.0, 90)]
    metrics = compute_trip_metrics(waypoints, T0, None)
    assert metrics.total_distance == pytest.approx(100)
    assert metrics.avg_speed == pytest.approx((20 + 90) / 2)
    assert metrics.max_speed == pytest.approx(90)
    # not distance / time
    assert metrics.avg_speed != pytest.approx(100 / 1.5)


def test_zero_elapsed_segment_is_skipped():
    waypoints = [wp(41.0, -87.0, 0), wp(41.1, -87.0, 0), wp(41.2, -87.0, 60)]
    metrics = compute_trip_metrics(waypoints, T0, None)
    assert metrics.total_distance == pytest.approx(haversine(41.0, -87.0, 41.2, -87.0))
    segment = haversine(41.1, -87.0, 41.2, -87.0)
    assert metrics.avg_speed == pytest.approx(segment)
    assert metrics.max_speed == pytest.approx(segment)


def test_total_time_uses_trip_timestamps_only():
    waypoints = [wp(41.0, -87.0, 0), wp(41.5, -87.0, 60)]
    metrics = compute_trip_metrics(waypoints, T0, T0 + timedelta(hours=3, minutes=15))
    assert metrics.total_time == pytest.approx(195)


def test_elevation_gain_and_loss():
    waypoints = [
        wp(41.0, -87.0, 0, altitude=100),
        wp(41.1, -87.0, 10, altitude=250),
        wp(41.2, -87.0, 20),
        wp(41.3, -87.0, 30, altitude=200),
        wp(41.4, -87.0, 40, altitude=180),
    ]
    elevation = compute_elevation_stats(waypoints)
    assert elevation.gain == 150
    assert elevation.loss == 20
    assert elevation.max == 250
    assert elevation.min == 100


def test_elevation_needs_two_readings():
    assert compute_elevation_stats([wp(41.0, -87.0, 0, altitude=100), wp(41.1, -87.0, 5)]) is None
