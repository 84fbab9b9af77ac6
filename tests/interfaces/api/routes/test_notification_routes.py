"""Integration tests for the event notification endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest

from rsvp_hub.utils import now_in_app_timezone


@pytest.fixture()
def upcoming(make_event):
    start = (now_in_app_timezone() + timedelta(days=3)).replace(
        hour=19, minute=0, second=0, microsecond=0
    )
    return make_event("upcoming", start=start)


def test_notifications_require_credentials(client, upcoming) -> None:
    assert client.get("/events/upcoming/notifications").status_code == 401

    response = client.get(
        "/events/upcoming/notifications", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_unknown_event_is_404(client, organizer, auth_headers) -> None:
    response = client.get("/events/missing/notifications", headers=auth_headers(organizer))

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"


def test_only_the_organizer_can_schedule(client, upcoming, attendee, auth_headers) -> None:
    response = client.post(
        "/events/upcoming/notifications",
        json={"scheduleType": "HOURS_BEFORE", "relativeMinutes": 120},
        headers=auth_headers(attendee),
    )

    assert response.status_code == 403


def test_schedule_list_and_cancel(client, upcoming, organizer, attendee, auth_headers) -> None:
    created = client.post(
        "/events/upcoming/notifications",
        json={"scheduleType": "HOURS_BEFORE", "relativeMinutes": 120, "messageTemplate": "Hi"},
        headers=auth_headers(organizer),
    )
    assert created.status_code == 201
    body = created.json()
    assert body["kind"] == "SCHEDULED"
    assert body["scheduleType"] == "HOURS_BEFORE"
    assert body["status"] == "PENDING"
    assert body["hoursBeforeValue"] == 2
    assert body["messageTemplate"] == "Hi"
    assert body["recipients"] is None

    listing = client.get("/events/upcoming/notifications", headers=auth_headers(attendee))
    assert listing.status_code == 200
    assert listing.json()["isOrganizer"] is False
    assert [item["id"] for item in listing.json()["notifications"]] == [body["id"]]

    cancelled = client.delete(
        f"/events/upcoming/notifications/{body['id']}", headers=auth_headers(organizer)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "CANCELLED"

    again = client.delete(
        f"/events/upcoming/notifications/{body['id']}", headers=auth_headers(organizer)
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Can only cancel pending notifications"

    missing = client.delete("/events/upcoming/notifications/9999", headers=auth_headers(organizer))
    assert missing.status_code == 404


def test_schedule_validation_errors_are_400(client, upcoming, organizer, auth_headers) -> None:
    headers = auth_headers(organizer)

    none = client.post("/events/upcoming/notifications", json={"scheduleType": "NONE"}, headers=headers)
    assert none.status_code == 400

    after_start = client.post(
        "/events/upcoming/notifications",
        json={
            "scheduleType": "SPECIFIC_TIME",
            "specificTime": (upcoming.datetime + timedelta(hours=1)).isoformat(),
        },
        headers=headers,
    )
    assert after_start.status_code == 400
    assert after_start.json()["detail"] == "Notification must be scheduled before the event starts"


def test_pending_cap_is_enforced(client, upcoming, organizer, auth_headers) -> None:
    headers = auth_headers(organizer)
    for minutes in (30, 60, 90, 120, 150):
        response = client.post(
            "/events/upcoming/notifications",
            json={"scheduleType": "MINUTES_BEFORE", "relativeMinutes": minutes},
            headers=headers,
        )
        assert response.status_code == 201

    rejected = client.post(
        "/events/upcoming/notifications",
        json={"scheduleType": "MINUTES_BEFORE", "relativeMinutes": 180},
        headers=headers,
    )

    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Maximum of 5 pending notifications allowed per event"


def test_reminder_put_get_and_remove(client, upcoming, organizer, attendee, auth_headers) -> None:
    headers = auth_headers(organizer)

    empty = client.get("/events/upcoming/reminder", headers=auth_headers(attendee))
    assert empty.json() == {"reminder": None, "isOrganizer": False}

    created = client.put(
        "/events/upcoming/reminder",
        json={"scheduleType": "HOURS_BEFORE", "hoursBeforeValue": 4},
        headers=headers,
    )
    assert created.status_code == 200
    reminder = created.json()["reminder"]
    assert reminder["kind"] == "REMINDER"
    assert reminder["hoursBeforeValue"] == 4

    updated = client.put(
        "/events/upcoming/reminder", json={"scheduleType": "DAY_BEFORE"}, headers=headers
    )
    assert updated.json()["reminder"]["id"] == reminder["id"]
    assert updated.json()["reminder"]["scheduleType"] == "DAY_BEFORE"

    fetched = client.get("/events/upcoming/reminder", headers=headers)
    assert fetched.json()["isOrganizer"] is True
    assert fetched.json()["reminder"]["id"] == reminder["id"]

    removed = client.put("/events/upcoming/reminder", json={"scheduleType": "NONE"}, headers=headers)
    assert removed.json()["reminder"] is None
    assert client.get("/events/upcoming/reminder", headers=headers).json()["reminder"] is None


def test_reminder_hours_out_of_range(client, upcoming, organizer, attendee, auth_headers) -> None:
    response = client.put(
        "/events/upcoming/reminder",
        json={"scheduleType": "HOURS_BEFORE", "hoursBeforeValue": 30},
        headers=auth_headers(organizer),
    )
    assert response.status_code == 400

    forbidden = client.put(
        "/events/upcoming/reminder",
        json={"scheduleType": "DAY_BEFORE"},
        headers=auth_headers(attendee),
    )
    assert forbidden.status_code == 403
