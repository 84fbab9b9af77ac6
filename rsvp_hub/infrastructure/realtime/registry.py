"""Process-local registry mapping topics to live connections."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from rsvp_hub.domain.entities import ServerMessage

from .broadcast import BroadcastDispatcher
from .connection import Connection

logger = logging.getLogger(__name__)


class PubSub(Protocol):
    """Operations the realtime layer needs from a publish/subscribe backend.

    :class:`ChannelRegistry` keeps everything in process memory. A backend
    relaying through a message bus can implement the same four methods to
    serve several server instances.
    """

    def subscribe(self, topic: str, connection: Connection) -> None:
        ...

    def unsubscribe(self, topic: str, connection: Connection) -> bool:
        ...

    def unsubscribe_all(self, connection: Connection) -> list[str]:
        ...

    def publish(self, topic: str, payload: ServerMessage) -> int:
        ...


class ChannelRegistry:
    """Manage live connections grouped by topic.

    A topic exists only while at least one connection is subscribed to it.
    """

    def __init__(self) -> None:
        self._topics: dict[str, set[Connection]] = {}
        self._memberships: dict[Connection, set[str]] = {}
        self._lock = threading.RLock()
        self._broadcaster = BroadcastDispatcher(self)

    @property
    def broadcaster(self) -> BroadcastDispatcher:
        return self._broadcaster

    def subscribe(self, topic: str, connection: Connection) -> None:
        """Add ``connection`` to ``topic``; subscribing twice is a no-op."""

        with self._lock:
            self._topics.setdefault(topic, set()).add(connection)
            self._memberships.setdefault(connection, set()).add(topic)

    def unsubscribe(self, topic: str, connection: Connection) -> bool:
        """Remove ``connection`` from ``topic`` and drop the topic once empty."""

        with self._lock:
            connections = self._topics.get(topic)
            if connections is None or connection not in connections:
                return False
            connections.discard(connection)
            if not connections:
                self._topics.pop(topic, None)

            topics = self._memberships.get(connection)
            if topics is not None:
                topics.discard(topic)
                if not topics:
                    self._memberships.pop(connection, None)
            return True

    def unsubscribe_all(self, connection: Connection) -> list[str]:
        """Remove ``connection`` from every topic and return the topics left."""

        with self._lock:
            topics = sorted(self._memberships.get(connection, ()))
            for topic in topics:
                self.unsubscribe(topic, connection)
        if topics:
            logger.debug(
                "Connection %s left %d topic(s)",
                getattr(connection, "id", connection),
                len(topics),
            )
        return topics

    def publish(self, topic: str, payload: ServerMessage) -> int:
        """Fire-and-forget delivery of ``payload`` to the subscribers of ``topic``."""

        return self._broadcaster.publish(topic, payload)

    def connections(self, topic: str) -> tuple[Connection, ...]:
        """Return a snapshot of the connections subscribed to ``topic``."""

        with self._lock:
            return tuple(self._topics.get(topic, ()))

    def topics(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._topics)

    def topics_for(self, connection: Connection) -> frozenset[str]:
        with self._lock:
            return frozenset(self._memberships.get(connection, ()))


__all__ = ["ChannelRegistry", "PubSub"]
