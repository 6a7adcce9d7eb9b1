"""
HTTP boundary tests: routing, payload shapes and error mapping.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from appointments.application.exceptions import StoreError
from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.main import app
from appointments.wiring.dependencies import (
    get_booking_use_case,
    get_cleanup_sweeper,
    get_query_use_case,
)
from conftest import CUSTOMER_ID, NOW, PROVIDER_ID, SECOND_CUSTOMER_ID


@pytest.fixture
def client(booking, queries, sweeper):
    app.dependency_overrides[get_booking_use_case] = lambda: booking
    app.dependency_overrides[get_query_use_case] = lambda: queries
    app.dependency_overrides[get_cleanup_sweeper] = lambda: sweeper
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _payload(**overrides):
    body = {
        "customer_id": CUSTOMER_ID,
        "provider_id": PROVIDER_ID,
        "service_type": "DOCTOR",
        "scheduled_at": (NOW + timedelta(hours=24)).isoformat(),
        "notes": "Annual check",
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_and_fetch(client):
    response = client.post("/api/v1/appointments", json=_payload())
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["customer_name"] == "John Doe"
    assert data["provider_name"] == "Dr. Smith"
    assert data["service_type"] == "DOCTOR"

    fetched = client.get(f"/api/v1/appointments/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == data


def test_error_mapping(client):
    assert client.post("/api/v1/appointments", json=_payload()).status_code == 201

    conflict = client.post(
        "/api/v1/appointments",
        json=_payload(customer_id=SECOND_CUSTOMER_ID, scheduled_at=(NOW + timedelta(hours=24, minutes=30)).isoformat()),
    )
    assert conflict.status_code == 409

    past = client.post("/api/v1/appointments", json=_payload(scheduled_at=(NOW - timedelta(hours=1)).isoformat()))
    assert past.status_code == 400

    unknown_service = client.post(
        "/api/v1/appointments",
        json=_payload(service_type="ASTROLOGER", scheduled_at=(NOW + timedelta(days=5)).isoformat()),
    )
    assert unknown_service.status_code == 400

    not_provider = client.post("/api/v1/appointments", json=_payload(provider_id=SECOND_CUSTOMER_ID))
    assert not_provider.status_code == 400

    assert client.get("/api/v1/appointments/999").status_code == 404
    assert client.get("/api/v1/appointments/customer/999").status_code == 404
    assert client.get("/api/v1/appointments/status/LOST").status_code == 400


def test_malformed_requests_are_bad_requests(client):
    missing = _payload()
    del missing["scheduled_at"]
    response = client.post("/api/v1/appointments", json=missing)
    assert response.status_code == 400
    assert any("scheduled_at" in err["loc"] for err in response.json()["detail"])

    assert client.post("/api/v1/appointments", json=_payload(scheduled_at="not-a-date")).status_code == 400
    assert (
        client.get("/api/v1/appointments/date-range", params={"start": "yesterday", "end": NOW.isoformat()}).status_code
        == 400
    )
    assert client.get("/api/v1/appointments/abc").status_code == 400


def test_update_status_and_delete(client):
    created = client.post("/api/v1/appointments", json=_payload()).json()

    updated = client.put(f"/api/v1/appointments/{created['id']}", json={"notes": "Bring referral"})
    assert updated.status_code == 200
    assert updated.json()["notes"] == "Bring referral"
    assert updated.json()["service_type"] == "DOCTOR"

    status = client.patch(f"/api/v1/appointments/{created['id']}/status", json={"status": "CONFIRMED"})
    assert status.status_code == 200
    assert status.json()["status"] == "CONFIRMED"

    assert client.get("/api/v1/appointments/status/confirmed").json()[0]["id"] == created["id"]

    assert client.delete(f"/api/v1/appointments/{created['id']}").status_code == 204
    assert client.delete(f"/api/v1/appointments/{created['id']}").status_code == 404


def test_listing_search_range_and_stats(client):
    created = client.post("/api/v1/appointments", json=_payload()).json()

    assert [a["id"] for a in client.get("/api/v1/appointments").json()] == [created["id"]]
    assert len(client.get("/api/v1/appointments/customer/1/upcoming").json()) == 1
    assert client.get("/api/v1/appointments/provider/2/past").json() == []
    assert len(client.get("/api/v1/appointments/search", params={"keyword": "annual"}).json()) == 1

    in_range = client.get(
        "/api/v1/appointments/date-range",
        params={"start": NOW.isoformat(), "end": (NOW + timedelta(days=2)).isoformat()},
    )
    assert in_range.status_code == 200
    assert len(in_range.json()) == 1

    stats = client.get("/api/v1/appointments/stats").json()
    assert stats == {"total": 1, "pending": 1, "confirmed": 0, "completed": 0, "cancelled": 0}
    assert client.get("/api/v1/appointments/provider/2/stats").json()["total"] == 1


def test_cleanup_endpoint(client, clock):
    client.post("/api/v1/appointments", json=_payload())
    clock.advance(timedelta(days=2))

    response = client.post("/api/v1/cleanup/run")
    assert response.status_code == 200
    assert response.json() == {"removed": 1}
    assert client.post("/api/v1/cleanup/run").json() == {"removed": 0}


def test_internal_errors_are_opaque(client):
    class _BrokenBooking(BookingUseCase):
        def get_by_id(self, appointment_id):
            raise StoreError("disk full at /var/lib/appointments.json")

    broken = _BrokenBooking(store=None, participants=None, clock=None)
    app.dependency_overrides[get_booking_use_case] = lambda: broken

    response = client.get("/api/v1/appointments/1")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_unexpected_exceptions_are_opaque():
    class _ExplodingSweeper(CleanupSweeper):
        def run_cleanup_now(self) -> int:
            raise RuntimeError("boom")

    app.dependency_overrides[get_cleanup_sweeper] = lambda: _ExplodingSweeper(None, None)
    try:
        response = TestClient(app, raise_server_exceptions=False).post("/api/v1/cleanup/run")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
