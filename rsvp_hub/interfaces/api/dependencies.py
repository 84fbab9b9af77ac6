"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, Path, status
from fastapi.security import OAuth2PasswordBearer
from starlette.requests import HTTPConnection
from sqlalchemy.orm import Session

from rsvp_hub.config import get_settings
from rsvp_hub.domain.entities import Event, User
from rsvp_hub.infrastructure.database import get_db
from rsvp_hub.infrastructure.realtime import PubSub
from rsvp_hub.infrastructure.repositories import EventRepository, UserRepository
from rsvp_hub.infrastructure.security import decode_access_token
from rsvp_hub.infrastructure.sms import SmsConfigurationError, SmsSender, TwilioSmsSender

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _unauthorized() from exc

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_event(slug: str = Path(...), db: Session = Depends(get_db)) -> Event:
    event = EventRepository(db).get_by_slug(slug)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


def require_organizer(event: Event, user: User) -> None:
    """Ensure ``user`` organizes ``event``."""

    if not event.is_organized_by(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organizer can manage notifications",
        )


def get_channel_registry(connection: HTTPConnection) -> PubSub:
    """Return the registry shared by HTTP handlers and websocket connections."""

    return connection.app.state.channel_registry


def get_sms_sender() -> SmsSender:
    """Return a configured :class:`TwilioSmsSender`."""

    try:
        return TwilioSmsSender.from_settings()
    except SmsConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


def get_optional_sms_sender() -> SmsSender | None:
    settings = get_settings()
    if not settings.sms_enabled:
        return None
    return TwilioSmsSender.from_settings(settings)


def require_cron_secret(authorization: str | None = Header(default=None)) -> None:
    """Reject scheduler calls that do not carry the configured secret."""

    secret = get_settings().cron_secret
    if not secret:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or token != secret:
        raise _unauthorized("Invalid cron secret")
