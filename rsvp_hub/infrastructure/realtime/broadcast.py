"""Serialize realtime messages and push them to every connection on a topic."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rsvp_hub.domain.entities import ServerMessage

from .topics import event_topic, user_topic

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .registry import ChannelRegistry

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Best-effort, at-most-once fan-out over the connections of a topic.

    A connection that fails to accept a message is dropped from the topic
    right away. Nothing is retried or stored for clients that are offline;
    they recover by fetching the current state.
    """

    def __init__(self, registry: "ChannelRegistry") -> None:
        self._registry = registry

    def publish(self, topic: str, payload: ServerMessage) -> int:
        """Deliver ``payload`` to ``topic`` and return how many connections took it."""

        connections = self._registry.connections(topic)
        if not connections:
            return 0

        message = encode_message(payload)
        delivered = 0
        for connection in connections:
            try:
                connection.send(message)
            except Exception as exc:
                logger.warning(
                    "Removing connection %s from %s after failed send: %s",
                    getattr(connection, "id", connection),
                    topic,
                    exc,
                )
                self._registry.unsubscribe(topic, connection)
            else:
                delivered += 1
        return delivered

    def broadcast_to_event(self, event_slug: str, payload: ServerMessage) -> int:
        return self.publish(event_topic(event_slug), payload)

    def broadcast_to_user(self, user_id: int | str, payload: ServerMessage) -> int:
        return self.publish(user_topic(user_id), payload)


def serialize_message(payload: ServerMessage) -> dict[str, Any]:
    """Return the JSON-ready wire representation of ``payload``."""

    data = _to_wire(asdict(payload))
    return {"type": payload.message_type.value, **data}


def encode_message(payload: ServerMessage) -> str:
    return json.dumps(serialize_message(payload))


def _to_wire(value: Any) -> Any:
    """Camel-case mapping keys and turn datetimes into ISO strings."""

    if isinstance(value, dict):
        return {_camelize(key): _to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _camelize(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


__all__ = ["BroadcastDispatcher", "encode_message", "serialize_message"]
