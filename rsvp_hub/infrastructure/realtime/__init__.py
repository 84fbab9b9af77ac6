"""Realtime fan-out of event and RSVP changes over websockets."""

from .broadcast import BroadcastDispatcher, encode_message, serialize_message
from .connection import Connection, ConnectionClosedError, WebSocketConnection
from .lifecycle import ConnectionLifecycleHandler, ConnectionState
from .protocol import ClientMessageType, InvalidMessageError, parse_client_message
from .registry import ChannelRegistry, PubSub
from .topics import event_topic, user_topic

__all__ = [
    "BroadcastDispatcher",
    "ChannelRegistry",
    "ClientMessageType",
    "Connection",
    "ConnectionClosedError",
    "ConnectionLifecycleHandler",
    "ConnectionState",
    "InvalidMessageError",
    "PubSub",
    "WebSocketConnection",
    "encode_message",
    "event_topic",
    "parse_client_message",
    "serialize_message",
    "user_topic",
]
