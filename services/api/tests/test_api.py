import json

from fastapi.testclient import TestClient
from holidaze.api.deps import get_source
from holidaze.main import app
from holidaze.services.availability.fixture_source import FixtureSource


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed_or_generated(client):
    resp = client.get("/health", headers={"X-Request-Id": "req-123"})
    assert resp.headers["X-Request-Id"] == "req-123"

    resp = client.get("/health")
    assert resp.headers["X-Request-Id"]


def test_venue_availability_conflict_and_free(client):
    resp = client.get(
        "/v1/venues/v1/availability",
        params={"dateFrom": "2026-03-12", "dateTo": "2026-03-13"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["venueId"] == "v1"
    assert body["available"] is False

    resp = client.get(
        "/v1/venues/v1/availability",
        params={"dateFrom": "2026-03-16", "dateTo": "2026-03-20"},
    )
    assert resp.json()["available"] is True


def test_unknown_venue_fails_open(client):
    resp = client.get(
        "/v1/venues/nope/availability",
        params={"dateFrom": "2026-03-12", "dateTo": "2026-03-13"},
    )
    assert resp.status_code == 200
    assert resp.json()["available"] is True


def test_reversed_range_is_422(client):
    resp = client.get(
        "/v1/venues/v1/availability",
        params={"dateFrom": "2026-03-15", "dateTo": "2026-03-10"},
    )
    assert resp.status_code == 422
    assert "reversed" in resp.json()["detail"]


def test_bad_date_is_422(client):
    resp = client.get(
        "/v1/venues/v1/availability",
        params={"dateFrom": "someday", "dateTo": "2026-03-10"},
    )
    assert resp.status_code == 422


def test_batch_availability_keeps_order(client):
    resp = client.post(
        "/v1/availability/batch",
        json={
            "venueIds": ["v3", "v1", "missing", "v2"],
            "dateFrom": "2026-03-12",
            "dateTo": "2026-03-13",
        },
    )
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["venueId"] for r in results] == ["v3", "v1", "missing", "v2"]
    assert [r["available"] for r in results] == [True, False, True, True]


def test_batch_rejects_empty_venue_id(client):
    resp = client.post(
        "/v1/availability/batch",
        json={"venueIds": ["v1", ""], "dateFrom": "2026-03-12", "dateTo": "2026-03-13"},
    )
    assert resp.status_code == 422


def test_search_with_dates(client):
    resp = client.get(
        "/v1/venues/search",
        params={"q": "norway", "guests": 3, "checkIn": "2026-03-12", "checkOut": "2026-03-13"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["availabilityChecked"] is True
    assert [v["id"] for v in body["venues"]] == ["v3"]
    assert body["venues"][0]["maxGuests"] == 8


def test_search_without_dates(client):
    resp = client.get("/v1/venues/search", params={"q": "cabin"})
    body = resp.json()
    assert body["availabilityChecked"] is False
    assert body["count"] == 1
    assert body["venues"][0]["city"] == "Bergen"


def test_booked_days(client):
    resp = client.get("/v1/venues/v1/booked-days")
    assert resp.status_code == 200
    assert resp.json() == [
        "2026-03-10",
        "2026-03-11",
        "2026-03-12",
        "2026-03-13",
        "2026-03-14",
        "2026-03-15",
    ]

    assert len(client.get("/v1/venues/v3/booked-days").json()) == 17


def test_booked_days_unknown_venue_is_404(client):
    resp = client.get("/v1/venues/nope/booked-days")
    assert resp.status_code == 404


def test_booked_days_for_one_customer(client):
    resp = client.get("/v1/venues/v1/booked-days", params={"customer": "kari"})
    assert resp.status_code == 200
    assert resp.json()[0] == "2026-03-10"
    assert len(resp.json()) == 6

    # Someone else's stay on the same venue is not theirs to see.
    resp = client.get("/v1/venues/v1/booked-days", params={"customer": "ola"})
    assert resp.status_code == 200
    assert resp.json() == []

    # Bookings without a customer never match a name.
    resp = client.get("/v1/venues/v3/booked-days", params={"customer": "kari"})
    assert resp.json() == []


def test_search_with_malformed_venue_row_is_502(tmp_path):
    path = tmp_path / "venues.json"
    path.write_text(
        json.dumps(
            {
                "venues": [
                    {"id": "ok", "name": "Fjord Cabin", "maxGuests": 2},
                    {"id": "bad", "name": None, "description": "cabin by the sea"},
                ]
            }
        ),
        encoding="utf-8",
    )
    broken = FixtureSource(str(path))
    app.dependency_overrides[get_source] = lambda: broken
    try:
        with TestClient(app) as c:
            resp = c.get("/v1/venues/search", params={"q": "cabin"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 502
    assert "malformed venue payload" in resp.json()["detail"]
