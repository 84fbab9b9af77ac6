"""Bearer token helpers used to identify the acting user."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from rsvp_hub.config import get_settings

ALGORITHM = "HS256"
DEFAULT_EXPIRY = timedelta(hours=12)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_EXPIRY)
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
