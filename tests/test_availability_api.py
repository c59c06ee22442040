from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from app.services.availability.availability_service import AvailabilityService

URL = "/api/v1/public/salons/{slug}/availability"


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_returns_slots_with_salon_metadata(client, make_salon) -> None:
    make_salon(capacity=2)

    response = client.get(URL.format(slug="glow"), params={"date": "2025-09-15", "duration": "60"})

    assert response.status_code == 200
    body = response.json()
    assert body["salon"] == {"name": "Glow", "slug": "glow", "time_zone": "UTC"}
    assert body["capacity"] == 2
    assert body["granularity_minutes"] == 30
    assert body["available_count"] == 15
    assert len(body["slots"]) == 15
    assert body["slots"][0]["time"] == "09:00"
    assert body["slots"][0]["capacity_remaining"] == 2
    assert body["slots"][-1]["time"] == "16:00"
    assert "X-Correlation-ID" in response.headers


def test_local_and_utc_instants_are_both_reported(client, make_salon) -> None:
    make_salon(time_zone="Australia/Sydney")

    response = client.get(
        URL.format(slug="glow"),
        params={"date": "2025-09-15", "duration": "60", "granularity": "60"},
    )

    first = response.json()["slots"][0]
    # Sydney is UTC+10 in September
    assert datetime.fromisoformat(first["start"].replace("Z", "+00:00")) == utc(2025, 9, 14, 23)
    assert first["local_start"].startswith("2025-09-15T09:00:00+10:00")
    assert first["time"] == "09:00"


def test_only_available_filters_booked_slots(client, make_salon, add_appointment) -> None:
    salon = make_salon(capacity=1)
    add_appointment(salon, utc(2025, 9, 15, 10), utc(2025, 9, 15, 11))

    response = client.get(
        URL.format(slug="glow"),
        params={"date": "2025-09-15", "duration": "60", "granularity": "60", "only_available": "true"},
    )

    body = response.json()
    times = [slot["time"] for slot in body["slots"]]
    assert "10:00" not in times
    assert body["available_count"] == len(times) == 7


def test_unavailable_slot_explains_why(client, make_salon, add_appointment) -> None:
    salon = make_salon(capacity=1)
    add_appointment(salon, utc(2025, 9, 15, 10), utc(2025, 9, 15, 11))

    response = client.get(
        URL.format(slug="glow"),
        params={"date": "2025-09-15", "duration": "60", "granularity": "60"},
    )

    blocked = next(slot for slot in response.json()["slots"] if slot["time"] == "10:00")
    assert blocked["available"] is False
    assert blocked["reason"] == "Time slot not available (capacity exceeded)"


def test_unknown_salon_is_404(client) -> None:
    response = client.get(URL.format(slug="missing"), params={"date": "2025-09-15", "duration": "60"})

    assert response.status_code == 404
    assert response.json() == {"detail": "Salon not found"}


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"date": "2025-09-15"},
        {"duration": "60"},
        {"date": "2025-09-15", "duration": "0"},
        {"date": "2025-09-15", "duration": "-10"},
        {"date": "2025-09-15", "duration": "sixty"},
        {"date": "2025-09-15", "duration": "600"},
        {"date": "2025-02-30", "duration": "60"},
        {"date": "2025-9-15", "duration": "60"},
        {"date": "2025-09-15", "duration": "60", "granularity": "0"},
        {"date": "2025-09-15", "duration": "60", "only_available": "maybe"},
    ],
)
def test_bad_parameters_are_400(client, make_salon, params) -> None:
    make_salon()

    response = client.get(URL.format(slug="glow"), params=params)

    assert response.status_code == 400
    assert response.json()["detail"]


def test_unexpected_failure_is_generic_500(client, make_salon) -> None:
    make_salon()

    with patch.object(AvailabilityService, "compute_availability", side_effect=RuntimeError("db exploded")):
        response = client.get(URL.format(slug="glow"), params={"date": "2025-09-15", "duration": "60"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to fetch availability"}
    assert "exploded" not in response.text


def test_slot_check_endpoint(client, make_salon, add_appointment) -> None:
    salon = make_salon(capacity=1)
    booked = add_appointment(salon, utc(2025, 9, 15, 10), utc(2025, 9, 15, 11))
    url = URL.format(slug="glow") + "/check"

    full = client.get(url, params={"date": "2025-09-15", "time": "10:00", "duration": "60"})
    moved = client.get(
        url, params={"date": "2025-09-15", "time": "10:00", "duration": "60", "exclude": str(booked.id)}
    )

    assert full.status_code == 200
    assert full.json() == {
        "available": False,
        "reason": "No availability at this time",
        "capacity_used": 1,
        "capacity_total": 1,
    }
    assert moved.json()["available"] is True


def test_slot_check_with_bad_exclude_id_is_400(client, make_salon) -> None:
    make_salon()

    response = client.get(
        URL.format(slug="glow") + "/check",
        params={"date": "2025-09-15", "time": "10:00", "duration": "60", "exclude": "not-a-uuid"},
    )

    assert response.status_code == 400


def test_health_endpoints(client) -> None:
    assert client.get("/health/").json()["status"] == "healthy"

    detailed = client.get("/health/detailed").json()
    assert detailed["database"] == "healthy"
    assert detailed["overall"] == "healthy"
