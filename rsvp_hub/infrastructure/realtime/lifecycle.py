"""Per-connection protocol state machine."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from rsvp_hub.domain.entities import (
    DashboardSubscribed,
    ErrorMessage,
    Pong,
    ServerMessage,
    Subscribed,
    Unsubscribed,
    UserSubscribed,
)

from .broadcast import encode_message
from .connection import Connection
from .protocol import (
    ClientMessage,
    ClientMessageType,
    InvalidMessageError,
    SubscribeDashboardMessage,
    SubscribeMessage,
    SubscribeUserMessage,
    UnsubscribeMessage,
    parse_client_message,
)
from .registry import PubSub
from .topics import event_topic, user_topic

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    OPEN = "OPEN"
    SUBSCRIBED = "SUBSCRIBED"
    CLOSED = "CLOSED"


_HANDLERS: dict[ClientMessageType, str] = {
    ClientMessageType.SUBSCRIBE: "_on_subscribe",
    ClientMessageType.SUBSCRIBE_DASHBOARD: "_on_subscribe_dashboard",
    ClientMessageType.SUBSCRIBE_USER: "_on_subscribe_user",
    ClientMessageType.UNSUBSCRIBE: "_on_unsubscribe",
    ClientMessageType.PING: "_on_ping",
}


class ConnectionLifecycleHandler:
    """React to the messages and closure of one realtime connection.

    Malformed or unknown messages are answered with an ``error`` message and
    never end the connection. Subscribing does not require credentials.
    """

    def __init__(self, connection: Connection, registry: PubSub) -> None:
        self.connection = connection
        self._registry = registry
        self._topics: set[str] = set()
        self.state = ConnectionState.OPEN

    @property
    def topics(self) -> frozenset[str]:
        return frozenset(self._topics)

    def handle_message(self, raw: str | bytes) -> None:
        """Process one inbound message to completion."""

        if self.state is ConnectionState.CLOSED:
            logger.debug("Ignoring message on closed connection %s", self.connection.id)
            return

        try:
            message = parse_client_message(raw)
        except InvalidMessageError as exc:
            self._reply(ErrorMessage(message=str(exc)))
            return

        handler: Callable[[ClientMessage], None] = getattr(
            self, _HANDLERS[message.message_type]
        )
        handler(message)

    def close(self) -> None:
        """Leave every topic; safe to call more than once."""

        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED
        self._topics.clear()
        left = self._registry.unsubscribe_all(self.connection)
        logger.info(
            "Realtime connection %s closed (left %d topic(s))",
            self.connection.id,
            len(left),
        )

    def fail(self, exc: BaseException) -> None:
        logger.warning("Realtime connection %s errored: %s", self.connection.id, exc)
        self.close()

    def _on_subscribe(self, message: SubscribeMessage) -> None:
        topic = event_topic(message.event_slug)
        self._join(topic)
        self._reply(Subscribed(channel=topic, authenticated=bool(message.token)))

    def _on_subscribe_dashboard(self, message: SubscribeDashboardMessage) -> None:
        for slug in message.event_slugs:
            self._join(event_topic(slug))
        self._reply(DashboardSubscribed(event_slugs=tuple(message.event_slugs)))

    def _on_subscribe_user(self, message: SubscribeUserMessage) -> None:
        user_id = str(message.user_id)
        self._join(user_topic(user_id))
        self._reply(UserSubscribed(user_id=user_id))

    def _on_unsubscribe(self, message: UnsubscribeMessage) -> None:
        topic = event_topic(message.event_slug)
        self._registry.unsubscribe(topic, self.connection)
        self._topics.discard(topic)
        if not self._topics:
            self.state = ConnectionState.OPEN
        self._reply(Unsubscribed(channel=topic))

    def _on_ping(self, _message: ClientMessage) -> None:
        self._reply(Pong())

    def _join(self, topic: str) -> None:
        self._registry.subscribe(topic, self.connection)
        self._topics.add(topic)
        self.state = ConnectionState.SUBSCRIBED
        logger.debug("Connection %s subscribed to %s", self.connection.id, topic)

    def _reply(self, payload: ServerMessage) -> None:
        self.connection.send(encode_message(payload))


_missing = [
    member.value
    for member in ClientMessageType
    if not callable(getattr(ConnectionLifecycleHandler, _HANDLERS.get(member, ""), None))
]
if _missing:  # pragma: no cover - every client message type needs a handler
    raise RuntimeError(f"Unhandled realtime message types: {_missing}")


__all__ = ["ConnectionLifecycleHandler", "ConnectionState"]
