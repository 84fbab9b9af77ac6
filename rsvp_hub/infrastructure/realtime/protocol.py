"""Messages accepted from realtime clients."""

from __future__ import annotations

import json
from enum import Enum
from typing import ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

INVALID_FORMAT = "Invalid message format"
UNKNOWN_TYPE = "Unknown message type"


class ClientMessageType(str, Enum):
    """Kinds of message a client may send."""

    SUBSCRIBE = "subscribe"
    SUBSCRIBE_DASHBOARD = "subscribe_dashboard"
    SUBSCRIBE_USER = "subscribe_user"
    UNSUBSCRIBE = "unsubscribe"
    PING = "ping"


class InvalidMessageError(ValueError):
    """The client sent something that cannot be acted upon."""


class _ClientMessage(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    message_type: ClassVar[ClientMessageType]
    invalid_reason: ClassVar[str] = INVALID_FORMAT


class SubscribeMessage(_ClientMessage):
    message_type: ClassVar[ClientMessageType] = ClientMessageType.SUBSCRIBE
    invalid_reason: ClassVar[str] = "eventSlug is required"

    event_slug: str = Field(min_length=1)
    # Presence only; viewing live updates does not require a verified identity.
    token: str | None = None


class SubscribeDashboardMessage(_ClientMessage):
    message_type: ClassVar[ClientMessageType] = ClientMessageType.SUBSCRIBE_DASHBOARD
    invalid_reason: ClassVar[str] = "eventSlugs must be an array"

    event_slugs: list[str]


class SubscribeUserMessage(_ClientMessage):
    message_type: ClassVar[ClientMessageType] = ClientMessageType.SUBSCRIBE_USER
    invalid_reason: ClassVar[str] = "userId is required"

    user_id: Union[int, str]

    @field_validator("user_id")
    @classmethod
    def _require_user_id(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("userId is required")
        return value


class UnsubscribeMessage(_ClientMessage):
    message_type: ClassVar[ClientMessageType] = ClientMessageType.UNSUBSCRIBE
    invalid_reason: ClassVar[str] = "eventSlug is required"

    event_slug: str = Field(min_length=1)


class PingMessage(_ClientMessage):
    message_type: ClassVar[ClientMessageType] = ClientMessageType.PING


ClientMessage = Union[
    SubscribeMessage,
    SubscribeDashboardMessage,
    SubscribeUserMessage,
    UnsubscribeMessage,
    PingMessage,
]

MESSAGE_MODELS: dict[ClientMessageType, type[_ClientMessage]] = {
    model.message_type: model
    for model in (
        SubscribeMessage,
        SubscribeDashboardMessage,
        SubscribeUserMessage,
        UnsubscribeMessage,
        PingMessage,
    )
}

_unmodelled = set(ClientMessageType) - set(MESSAGE_MODELS)
if _unmodelled:  # pragma: no cover - guards against adding a type without a model
    raise RuntimeError(f"No message model for {sorted(t.value for t in _unmodelled)}")


def parse_client_message(raw: str | bytes) -> ClientMessage:
    """Decode ``raw`` into one of the known client messages.

    Raises :class:`InvalidMessageError` carrying the text to send back to the
    client when the body is not JSON, names an unknown type or has the wrong
    shape.
    """

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidMessageError(INVALID_FORMAT) from exc
    if not isinstance(data, dict):
        raise InvalidMessageError(INVALID_FORMAT)

    try:
        message_type = ClientMessageType(data.get("type"))
    except ValueError as exc:
        raise InvalidMessageError(UNKNOWN_TYPE) from exc

    model = MESSAGE_MODELS[message_type]
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidMessageError(model.invalid_reason) from exc


__all__ = [
    "ClientMessage",
    "ClientMessageType",
    "INVALID_FORMAT",
    "InvalidMessageError",
    "MESSAGE_MODELS",
    "PingMessage",
    "SubscribeDashboardMessage",
    "SubscribeMessage",
    "SubscribeUserMessage",
    "UNKNOWN_TYPE",
    "UnsubscribeMessage",
    "parse_client_message",
]
