"""HTTP-level tests for the trip, route and certification endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

import polyline
import pytest

from conftest import CHICAGO, km_north

API = "/api/v1"
OTHER = {"X-User-Id": "rider-2"}


def create(client, headers, title="Lake Shore cruise", **fields):
    body = {"title": title, "start_location": {"lat": CHICAGO[0], "lng": CHICAGO[1]}, **fields}
    resp = client.post(f"{API}/trips", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"


def test_missing_user_header_is_unauthorized(client):
    assert client.get(f"{API}/trips").status_code == 401
    assert client.post(f"{API}/trips", json={}).status_code == 401


def test_create_and_get_trip(client, rider_headers):
    trip = create(client, rider_headers, tags=["lake"])
    assert trip["status"] == "planned"
    assert trip["user_id"] == "rider-1"
    assert trip["metrics"]["total_distance"] == 0

    resp = client.get(f"{API}/trips/{trip['id']}", headers=rider_headers)
    assert resp.status_code == 200
    assert resp.json()["tags"] == ["lake"]


def test_create_rejects_bad_coordinates(client, rider_headers):
    resp = client.post(
        f"{API}/trips",
        json={"title": "Nowhere", "start_location": {"lat": 123, "lng": 0}},
        headers=rider_headers,
    )
    assert resp.status_code == 422


def test_unknown_trip_is_404(client, rider_headers):
    resp = client.get(f"{API}/trips/nope", headers=rider_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"
    assert client.delete(f"{API}/trips/nope", headers=rider_headers).status_code == 404


def test_visibility_and_ownership(client, rider_headers):
    private = create(client, rider_headers, "Private")
    public = create(client, rider_headers, "Public", is_public=True)
    shared = create(client, rider_headers, "Shared", shared_with=["rider-2"])

    assert client.get(f"{API}/trips/{private['id']}", headers=OTHER).status_code == 403
    assert client.get(f"{API}/trips/{public['id']}", headers=OTHER).status_code == 200
    assert client.get(f"{API}/trips/{shared['id']}", headers=OTHER).status_code == 200

    # viewing is not editing
    resp = client.patch(f"{API}/trips/{public['id']}", json={"title": "Mine now"}, headers=OTHER)
    assert resp.status_code == 403
    assert resp.json()["error"] == "forbidden"
    assert client.delete(f"{API}/trips/{public['id']}", headers=OTHER).status_code == 403


def test_list_filters_sorts_and_paginates(client, rider_headers):
    for i, title in enumerate(["Charlie", "Alpha", "Bravo"]):
        create(client, rider_headers, title, start_time=f"2025-0{i + 1}-01T08:00:00Z", tags=["loop"] if i else [])
    create(client, OTHER, "Someone else's")

    resp = client.get(f"{API}/trips", headers=rider_headers)
    body = resp.json()
    assert body["total"] == 3
    assert [t["title"] for t in body["trips"]] == ["Bravo", "Alpha", "Charlie"]

    resp = client.get(
        f"{API}/trips",
        params={"sort_by": "title", "sort_order": "asc", "limit": 1, "offset": 1},
        headers=rider_headers,
    )
    body = resp.json()
    assert body["total"] == 3
    assert [t["title"] for t in body["trips"]] == ["Bravo"]
    assert body["limit"] == 1 and body["offset"] == 1

    resp = client.get(f"{API}/trips", params={"tags": "loop", "q": "alp"}, headers=rider_headers)
    assert [t["title"] for t in resp.json()["trips"]] == ["Alpha"]


def test_list_rejects_bad_sort_and_limit(client, rider_headers):
    assert client.get(f"{API}/trips", params={"sort_by": "fuel"}, headers=rider_headers).status_code == 422
    assert client.get(f"{API}/trips", params={"limit": 0}, headers=rider_headers).status_code == 422


def test_lifecycle_over_http(client, rider_headers):
    trip = create(client, rider_headers)
    url = f"{API}/trips/{trip['id']}"

    resp = client.post(f"{url}/waypoints", json={"lat": CHICAGO[0], "lng": CHICAGO[1]}, headers=rider_headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "invalid_state"

    assert client.patch(url, json={"status": "completed"}, headers=rider_headers).status_code == 409
    resp = client.patch(url, json={"status": "active", "start_time": "2025-06-01T08:00:00Z"}, headers=rider_headers)
    assert resp.status_code == 200

    for lat, ts in [(CHICAGO[0], "2025-06-01T08:00:00Z"), (km_north(CHICAGO[0], 60), "2025-06-01T09:00:00Z")]:
        resp = client.post(
            f"{url}/waypoints", json={"lat": lat, "lng": CHICAGO[1], "timestamp": ts}, headers=rider_headers
        )
        assert resp.status_code == 201

    resp = client.patch(url, json={"status": "completed", "end_time": "2025-06-01T09:30:00Z"}, headers=rider_headers)
    metrics = resp.json()["metrics"]
    assert metrics["total_distance"] == pytest.approx(60)
    assert metrics["avg_speed"] == pytest.approx(60)
    assert metrics["total_time"] == pytest.approx(90)

    path = client.get(f"{url}/path", headers=rider_headers).json()
    assert path["point_count"] == 2
    assert path["distance_km"] == pytest.approx(60, abs=0.01)
    assert path["polyline"] == polyline.encode([(CHICAGO[0], CHICAGO[1]), (km_north(CHICAGO[0], 60), CHICAGO[1])])
    assert path["geojson"]["coordinates"][0] == [CHICAGO[1], CHICAGO[0]]

    stats = client.get(f"{API}/trips/stats", headers=rider_headers).json()
    assert stats["completed_trips"] == 1
    assert stats["total_distance"] == pytest.approx(60)


def test_patch_cannot_touch_metrics(client, rider_headers):
    trip = create(client, rider_headers)
    resp = client.patch(
        f"{API}/trips/{trip['id']}",
        json={"title": "Renamed", "metrics": {"total_distance": 999}},
        headers=rider_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "Renamed"
    assert resp.json()["metrics"]["total_distance"] == 0


def test_photos_weather_and_delete(client, rider_headers):
    trip = create(client, rider_headers)
    url = f"{API}/trips/{trip['id']}"

    resp = client.post(f"{url}/photos", json={"url": "/p/1.jpg", "caption": "Skyline"}, headers=rider_headers)
    assert resp.status_code == 201
    weather = {
        "temperature": 70, "condition": "Clear", "humidity": 40,
        "wind_speed": 6, "wind_direction": 180, "icon": "clear-day",
    }
    resp = client.post(f"{url}/weather", json=weather, headers=rider_headers)
    assert resp.json()["weather"]["condition"] == "Clear"
    assert len(resp.json()["photos"]) == 1

    assert client.delete(url, headers=rider_headers).json() == {"ok": True}
    assert client.get(url, headers=rider_headers).status_code == 404


def test_routes(client):
    routes = client.get(f"{API}/routes").json()
    assert len(routes) == 6
    beartooth = next(r for r in routes if r["id"] == "beartooth-pass")
    assert beartooth["is_available"] is True
    assert beartooth["required_waypoints"] == 3
    assert beartooth["rewards"] == ["bronze", "silver", "gold"]

    resp = client.get(f"{API}/routes/beartooth-pass")
    assert resp.json()["certification_requirements"]["max_deviation_radius_m"] == 50
    assert client.get(f"{API}/routes/route-99").status_code == 404


def test_certification_flow(client, rider_headers):
    trip = create(client, rider_headers, "Beartooth run")
    resp = client.post(
        f"{API}/certifications/start",
        json={"trip_id": trip["id"], "route_id": "beartooth-pass"},
        headers=rider_headers,
    )
    assert resp.status_code == 201
    attempt_id = resp.json()["attempt"]["id"]
    assert resp.json()["route"]["id"] == "beartooth-pass"

    again = client.post(
        f"{API}/certifications/start",
        json={"trip_id": trip["id"], "route_id": "beartooth-pass"},
        headers=rider_headers,
    )
    assert again.status_code == 409

    url = f"{API}/certifications/{attempt_id}"
    far = client.post(
        f"{url}/waypoint", json={"lat": 45.0483, "lng": -109.4667, "waypoint_id": "wp-beartooth-summit"},
        headers=rider_headers,
    ).json()
    assert far["within_radius"] is False
    near = client.post(
        f"{url}/waypoint", json={"lat": 45.0033, "lng": -109.4667, "waypoint_id": "Beartooth Pass Summit"},
        headers=rider_headers,
    ).json()
    assert near["within_radius"] is True
    assert near["attempt"]["progress"]["waypoints_completed"] == 1

    assert client.post(f"{url}/submit", json={"photos": []}, headers=rider_headers).status_code == 422
    photo = {
        "url": "https://img.example/summit.jpg",
        "waypoint_id": "wp-beartooth-summit",
        "location": {"lat": 45.0033, "lng": -109.4667},
    }
    resp = client.post(f"{url}/submit", json={"photos": [photo], "notes": "Windy"}, headers=rider_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending_review"

    assert client.get(url, headers=OTHER).status_code == 403
    assert [a["id"] for a in client.get(f"{API}/certifications", headers=rider_headers).json()] == [attempt_id]
    cert = client.get(f"{API}/trips/{trip['id']}", headers=rider_headers).json()["certification"]
    assert cert["status"] == "pending"


def test_certification_out_of_season(client, rider_headers, clock):
    clock.current = datetime(2025, 1, 10, tzinfo=timezone.utc)
    trip = create(client, rider_headers)
    resp = client.post(
        f"{API}/certifications/start",
        json={"trip_id": trip["id"], "route_id": "beartooth-pass"},
        headers=rider_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "seasonally_unavailable"


def test_run_serves_app_with_uvicorn(monkeypatch):
    import evyroad.main as main

    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))
    main.run()
    settings = main.default_settings
    assert calls == [
        (main.app, {"host": settings.host, "port": settings.port, "log_level": settings.log_level.lower()})
    ]
