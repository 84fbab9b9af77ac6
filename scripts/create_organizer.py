"""Utility script to create an organizer, optionally with an event, and print a token."""

from __future__ import annotations

import argparse
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from rsvp_hub.domain.entities import Event, User
from rsvp_hub.infrastructure.database import SessionLocal, initialize_database
from rsvp_hub.infrastructure.repositories import EventRepository, UserRepository
from rsvp_hub.infrastructure.security import create_access_token
from rsvp_hub.utils import ensure_app_timezone


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for organizer creation."""

    parser = argparse.ArgumentParser(
        description="Create an organizer for local testing of reminders and realtime updates.",
    )
    parser.add_argument("--name", default="Organizer", help="Display name (default: Organizer)")
    parser.add_argument("--phone", required=True, help="Phone number in E.164 format")
    parser.add_argument("--event-slug", default=None, help="Also create an event with this slug")
    parser.add_argument("--event-title", default="Pickup game", help="Title of the created event")
    parser.add_argument("--location", default="TBD", help="Location of the created event")
    parser.add_argument(
        "--starts-at",
        type=datetime.fromisoformat,
        default=None,
        help="Event start as ISO 8601; naive values use APP_TIMEZONE",
    )
    parser.add_argument(
        "--timezone",
        default="America/Denver",
        help="IANA timezone of the event (default: America/Denver)",
    )
    return parser.parse_args()


def main() -> None:
    """Create the organizer and print a bearer token for it."""

    args = parse_args()
    if args.event_slug and args.starts_at is None:
        raise SystemExit("--starts-at is required when --event-slug is given.")

    initialize_database()

    session = SessionLocal()
    try:
        user = UserRepository(session).create(User(id=None, name=args.name, phone=args.phone))
        event = None
        if args.event_slug:
            starts_at = ensure_app_timezone(args.starts_at)
            event = EventRepository(session).create(
                Event(
                    id=None,
                    slug=args.event_slug,
                    title=args.event_title,
                    location=args.location,
                    datetime=starts_at,
                    end_datetime=starts_at,
                    timezone=args.timezone,
                    organizer_id=user.id,
                )
            )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the organizer: {exc}") from exc
    finally:
        session.close()

    print(f"Organizer created:\n  ID: {user.id}\n  Name: {user.name}\n  Phone: {user.phone}")
    if event is not None:
        print(f"  Event: /events/{event.slug}")
    print(f"  Token: {create_access_token({'sub': str(user.id)})}")


if __name__ == "__main__":
    main()
