"""Tests for the notification dispatcher."""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from rsvp_hub.application.use_cases.notifications import (
    build_notification_message,
    create_notification,
    dispatch_due_notifications,
    process_notification,
    record_delivery_status,
    resolve_recipients,
    set_event_reminder,
)
from rsvp_hub.application.use_cases.notifications import dispatch as dispatch_module
from rsvp_hub.domain.entities import (
    NotificationStatus,
    Recipient,
    Rsvp,
    RsvpStatus,
    ScheduleType,
    SentMessageStatus,
    User,
    aggregate_status,
)
from rsvp_hub.infrastructure.repositories import (
    NotificationRepository,
    SentMessageRepository,
    UserRepository,
)

DENVER = ZoneInfo("America/Denver")
CREATED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=DENVER)
FIRES_AT = datetime(2025, 3, 9, 18, 0, tzinfo=DENVER)
AFTER_FIRE = datetime(2025, 3, 9, 18, 1, tzinfo=DENVER)


@pytest.fixture()
def reminder(db_session, event, organizer):
    return set_event_reminder(
        db_session,
        event=event,
        schedule_type=ScheduleType.DAY_BEFORE,
        created_by=organizer.id,
        now=CREATED_AT,
    )


@pytest.mark.parametrize(
    ("sent", "failed", "expected"),
    [
        (3, 0, NotificationStatus.COMPLETED),
        (0, 0, NotificationStatus.COMPLETED),
        (0, 2, NotificationStatus.FAILED),
        (2, 1, NotificationStatus.PARTIALLY_FAILED),
    ],
)
def test_aggregate_status(sent, failed, expected) -> None:
    assert aggregate_status(sent, failed) is expected


def test_resolve_recipients_prefers_user_phone_and_skips_missing() -> None:
    rsvps = [
        Rsvp(id=1, event_id=1, status=RsvpStatus.IN, user_id=5, user_name="Alex", user_phone="+1"),
        Rsvp(id=2, event_id=1, status=RsvpStatus.IN, guest_name="Kim", guest_phone="+2"),
        Rsvp(id=3, event_id=1, status=RsvpStatus.IN, guest_phone="+3"),
        Rsvp(id=4, event_id=1, status=RsvpStatus.IN, guest_name="No Phone"),
    ]

    assert resolve_recipients(rsvps) == [
        Recipient(phone="+1", name="Alex", user_id=5),
        Recipient(phone="+2", name="Kim"),
        Recipient(phone="+3", name="Guest"),
    ]


def test_nothing_due_before_fire_time(db_session, reminder, sms_sender) -> None:
    summary = dispatch_due_notifications(
        db_session, sender=sms_sender, now=datetime(2025, 3, 9, 17, 59, tzinfo=DENVER)
    )

    assert summary.processed == 0
    assert summary.results == []
    assert sms_sender.sent == []


def test_partial_failure_is_recorded_per_recipient(
    db_session, event, attendee, reminder, add_rsvp, sms_sender
) -> None:
    add_rsvp(event, user_id=attendee.id)
    add_rsvp(event, guest_name="Kim", guest_phone="+15550000003")
    add_rsvp(event, guest_name="Bad", guest_phone="+15550000009")
    add_rsvp(event, RsvpStatus.OUT, guest_name="Nope", guest_phone="+15550000004")
    add_rsvp(event, RsvpStatus.WAITLIST, guest_name="Later", guest_phone="+15550000005")
    sms_sender.failing.add("+15550000009")

    summary = dispatch_due_notifications(
        db_session,
        sender=sms_sender,
        now=AFTER_FIRE,
        status_callback_url="https://example.test/webhooks/twilio/status",
    )

    assert summary.processed == 1
    result = summary.results[0]
    assert (result.notification_id, result.event_slug) == (reminder.id, "pickup")
    assert (result.sent, result.failed) == (2, 1)
    assert result.status is NotificationStatus.PARTIALLY_FAILED

    assert [to for to, _, _ in sms_sender.sent] == ["+15550000002", "+15550000003"]
    body = "Reminder: Pickup is Mon, Mar 10 at 7:00 PM. See you at Park!"
    assert all(text == body for _, text, _ in sms_sender.sent)
    assert all(url.endswith("/webhooks/twilio/status") for _, _, url in sms_sender.sent)

    stored = NotificationRepository(db_session).get(reminder.id)
    assert stored.status is NotificationStatus.PARTIALLY_FAILED
    assert stored.processed_at is not None

    messages = {
        message.phone_number: message
        for message in SentMessageRepository(db_session).list_for_notification(reminder.id)
    }
    assert messages["+15550000002"].status is SentMessageStatus.SENT
    assert messages["+15550000002"].recipient_user_id == attendee.id
    assert messages["+15550000002"].carrier_message_sid == "SM0001"
    assert messages["+15550000002"].sent_at is not None
    assert messages["+15550000009"].status is SentMessageStatus.FAILED
    assert "21211" in messages["+15550000009"].error_message
    assert set(messages) == {"+15550000002", "+15550000003", "+15550000009"}


def test_every_recipient_failing_marks_notification_failed(
    db_session, event, reminder, add_rsvp, sms_sender
) -> None:
    add_rsvp(event, guest_name="Bad", guest_phone="+15550000009")
    sms_sender.failing.add("+15550000009")

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    assert summary.results[0].status is NotificationStatus.FAILED
    assert (summary.results[0].sent, summary.results[0].failed) == (0, 1)


def test_empty_audience_completes_without_sending(db_session, reminder, sms_sender) -> None:
    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    result = summary.results[0]
    assert (result.sent, result.failed, result.status) == (0, 0, NotificationStatus.COMPLETED)
    assert sms_sender.sent == []
    assert NotificationRepository(db_session).get(reminder.id).status is NotificationStatus.COMPLETED


def test_custom_template_is_sent_verbatim(
    db_session, event, organizer, add_rsvp, sms_sender
) -> None:
    create_notification(
        db_session,
        event=event,
        schedule_type=ScheduleType.SPECIFIC_TIME,
        specific_time=FIRES_AT,
        message_template="Bring water",
        created_by=organizer.id,
        now=CREATED_AT,
    )
    add_rsvp(event, guest_name="Kim", guest_phone="+15550000003")

    dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    assert sms_sender.sent[0][1] == "Bring water"


def test_claimed_notification_is_not_sent_twice(
    db_session, event, reminder, add_rsvp, sms_sender
) -> None:
    add_rsvp(event, guest_name="Kim", guest_phone="+15550000003")
    nested_runs = []

    def run_again_mid_send(_to: str) -> None:
        nested_runs.append(dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE))

    sms_sender.on_send = run_again_mid_send

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    assert summary.processed == 1
    assert [run.processed for run in nested_runs] == [0]
    assert len(sms_sender.sent) == 1
    assert process_notification(db_session, reminder, sender=sms_sender) is None


def test_lost_claim_skips_notification(db_session, event, reminder, add_rsvp, sms_sender) -> None:
    add_rsvp(event, guest_name="Kim", guest_phone="+15550000003")
    NotificationRepository(db_session).transition_status(
        reminder.id, expected=NotificationStatus.PENDING, new=NotificationStatus.PROCESSING
    )

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    assert summary.processed == 0
    assert sms_sender.sent == []


def test_unexpected_error_fails_only_that_notification(
    db_session, make_event, organizer, add_rsvp, sms_sender, monkeypatch
) -> None:
    broken_event = make_event("broken")
    healthy_event = make_event("healthy")
    for target in (broken_event, healthy_event):
        set_event_reminder(
            db_session,
            event=target,
            schedule_type=ScheduleType.DAY_BEFORE,
            created_by=organizer.id,
            now=CREATED_AT,
        )
    add_rsvp(broken_event, guest_name="Boom", guest_phone="+15550000666")
    add_rsvp(healthy_event, guest_name="Kim", guest_phone="+15550000003")

    def build_message(event, template):
        if event.slug == "broken":
            raise RuntimeError("template rendering crashed")
        return build_notification_message(event, template)

    monkeypatch.setattr(dispatch_module, "build_notification_message", build_message)

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    by_slug = {result.event_slug: result for result in summary.results}
    assert summary.processed == 2
    assert by_slug["broken"].status is NotificationStatus.FAILED
    assert by_slug["broken"].error == "template rendering crashed"
    assert by_slug["healthy"].status is NotificationStatus.COMPLETED

    repository = NotificationRepository(db_session)
    broken = repository.get_reminder(broken_event.id)
    assert broken.status is NotificationStatus.FAILED
    assert broken.processed_at is not None


def test_recipient_error_does_not_block_the_others(
    db_session, event, reminder, add_rsvp, sms_sender
) -> None:
    phones = ["+15550000100", "+15550000101", "+15550000102"]
    for index, phone in enumerate(phones):
        add_rsvp(event, guest_name=f"Guest {index}", guest_phone=phone)

    def reset_first(to: str) -> None:
        if to == phones[0]:
            raise ConnectionError("socket reset")

    sms_sender.on_send = reset_first

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=AFTER_FIRE)

    result = summary.results[0]
    assert (result.sent, result.failed) == (2, 1)
    assert result.status is NotificationStatus.PARTIALLY_FAILED
    assert result.error is None
    assert [to for to, _, _ in sms_sender.sent] == phones[1:]

    messages = {
        message.phone_number: message
        for message in SentMessageRepository(db_session).list_for_notification(reminder.id)
    }
    assert messages[phones[0]].status is SentMessageStatus.FAILED
    assert messages[phones[0]].error_message == "socket reset"
    assert {messages[phone].status for phone in phones[1:]} == {SentMessageStatus.SENT}


def test_hours_before_notification_round_trip(
    db_session, event, organizer, attendee, add_rsvp, sms_sender
) -> None:
    notification = create_notification(
        db_session,
        event=event,
        schedule_type=ScheduleType.HOURS_BEFORE,
        relative_minutes=180,
        created_by=organizer.id,
        now=CREATED_AT,
    )
    friend = UserRepository(db_session).create(User(id=None, name="Sam", phone="+15550000007"))
    add_rsvp(event, user_id=attendee.id)
    add_rsvp(event, user_id=friend.id)
    fire_time = event.datetime - timedelta(minutes=180)

    early = dispatch_due_notifications(
        db_session, sender=sms_sender, now=fire_time - timedelta(seconds=1)
    )
    assert early.processed == 0

    summary = dispatch_due_notifications(db_session, sender=sms_sender, now=fire_time)

    assert summary.processed == 1
    result = summary.results[0]
    assert (result.notification_id, result.sent, result.failed) == (notification.id, 2, 0)
    assert result.status is NotificationStatus.COMPLETED
    assert sorted(to for to, _, _ in sms_sender.sent) == ["+15550000002", "+15550000007"]

    record_delivery_status(db_session, message_sid="SM0001", message_status="delivered")
    record_delivery_status(
        db_session,
        message_sid="SM0002",
        message_status="undelivered",
        error_code="30006",
        error_message="Landline or unreachable carrier",
    )

    statuses = sorted(
        message.status.value
        for message in SentMessageRepository(db_session).list_for_notification(notification.id)
    )
    assert statuses == ["DELIVERED", "FAILED"]
    stored = NotificationRepository(db_session).get(notification.id)
    assert stored.status is NotificationStatus.COMPLETED
