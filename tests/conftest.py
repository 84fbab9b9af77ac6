"""Shared fixtures for the test-suite.

The environment is primed before anything from :mod:`rsvp_hub` is imported
because the database engine is created from the settings at import time.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "rsvp_hub_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "America/Denver"
os.environ["ENVIRONMENT"] = "test"
for _name in (
    "CRON_SECRET",
    "PUBLIC_BASE_URL",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
):
    os.environ.pop(_name, None)

from rsvp_hub.config import get_settings  # noqa: E402

get_settings.cache_clear()

from rsvp_hub.domain.entities import Event, Rsvp, RsvpStatus, User  # noqa: E402
from rsvp_hub.infrastructure import models  # noqa: E402,F401
from rsvp_hub.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from rsvp_hub.infrastructure.realtime import ConnectionClosedError  # noqa: E402
from rsvp_hub.infrastructure.repositories import (  # noqa: E402
    EventRepository,
    RsvpRepository,
    UserRepository,
)
from rsvp_hub.infrastructure.sms import SmsDeliveryError, SmsReceipt  # noqa: E402
from rsvp_hub.utils import ensure_app_timezone  # noqa: E402

EVENT_START = ensure_app_timezone(datetime(2025, 3, 10, 19, 0))


class FakeConnection:
    """In-memory stand-in for a websocket connection."""

    def __init__(self, connection_id: str, *, broken: bool = False) -> None:
        self.id = connection_id
        self.broken = broken
        self.messages: list[str] = []

    def send(self, message: str) -> None:
        if self.broken:
            raise ConnectionClosedError(f"Connection {self.id} is closed")
        self.messages.append(message)

    def decoded(self) -> list[dict]:
        return [json.loads(message) for message in self.messages]

    def __repr__(self) -> str:
        return f"FakeConnection({self.id!r})"


class FakeSmsSender:
    """Record outgoing texts; phones listed in ``failing`` are rejected."""

    def __init__(self, *, failing: tuple[str, ...] = ()) -> None:
        self.failing = set(failing)
        self.sent: list[tuple[str, str, str | None]] = []
        self.auto_replies: list[str] = []
        self.on_send = None

    def send(self, to: str, body: str, *, status_callback: str | None = None) -> SmsReceipt:
        if self.on_send is not None:
            self.on_send(to)
        if to in self.failing:
            raise SmsDeliveryError(f"Twilio error 21211 (status 400): Invalid 'To' number {to}")
        self.sent.append((to, body, status_callback))
        return SmsReceipt(sid=f"SM{len(self.sent):04d}", status="queued")

    def send_auto_reply(self, to: str) -> SmsReceipt:
        if to in self.failing:
            raise SmsDeliveryError("Twilio error 30003 (status 400): Unreachable")
        self.auto_replies.append(to)
        return SmsReceipt(sid=f"SMR{len(self.auto_replies):04d}", status="queued")


@pytest.fixture()
def connection_factory():
    return FakeConnection


@pytest.fixture()
def sms_sender() -> FakeSmsSender:
    return FakeSmsSender()


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def organizer(db_session) -> User:
    return UserRepository(db_session).create(User(id=None, name="Olivia", phone="+15550000001"))


@pytest.fixture()
def attendee(db_session) -> User:
    return UserRepository(db_session).create(User(id=None, name="Alex", phone="+15550000002"))


@pytest.fixture()
def make_event(db_session, organizer):
    """Return a factory persisting events organized by ``organizer``."""

    def _make_event(slug: str = "pickup", *, start: datetime = EVENT_START, **overrides) -> Event:
        values = {
            "id": None,
            "slug": slug,
            "title": "Pickup",
            "location": "Park",
            "datetime": start,
            "end_datetime": start,
            "timezone": "America/Denver",
            "organizer_id": organizer.id,
        }
        values.update(overrides)
        return EventRepository(db_session).create(Event(**values))

    return _make_event


@pytest.fixture()
def event(make_event) -> Event:
    return make_event()


@pytest.fixture()
def add_rsvp(db_session):
    def _add_rsvp(event: Event, status: RsvpStatus = RsvpStatus.IN, **values) -> Rsvp:
        return RsvpRepository(db_session).create(
            Rsvp(id=None, event_id=event.id, status=status, **values)
        )

    return _add_rsvp


@pytest.fixture()
def app(db_session, sms_sender):
    """Return a fresh application wired to the fake SMS sender."""

    from main import create_app
    from rsvp_hub.interfaces.api.dependencies import get_optional_sms_sender, get_sms_sender

    application = create_app()
    application.dependency_overrides[get_sms_sender] = lambda: sms_sender
    application.dependency_overrides[get_optional_sms_sender] = lambda: sms_sender
    return application


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    from rsvp_hub.infrastructure.security import create_access_token

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def configure(monkeypatch):
    """Override settings through the environment for one test."""

    from rsvp_hub.config import reset_settings_cache

    def _configure(**values: str) -> None:
        for name, value in values.items():
            monkeypatch.setenv(name.upper(), value)
        reset_settings_cache()

    yield _configure
    monkeypatch.undo()
    reset_settings_cache()
