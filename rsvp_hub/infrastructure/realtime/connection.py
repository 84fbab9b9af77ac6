"""Websocket connection wrapper with a non-blocking outbound queue."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Protocol
from uuid import uuid4

import anyio
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionClosedError(RuntimeError):
    """Raised when a message is sent to a connection that can no longer deliver."""


class Connection(Protocol):
    """Anything the registry can hold: an identity plus a non-blocking send."""

    id: str

    def send(self, message: str) -> None:
        ...


class WebSocketConnection:
    """Queue outbound messages for a websocket and write them from one task.

    ``send`` never suspends: it only enqueues. Messages reach the socket in
    the order they were enqueued, which keeps per-topic ordering intact.
    """

    def __init__(self, websocket: WebSocket, *, connection_id: str | None = None) -> None:
        self.id = connection_id or uuid4().hex
        self._websocket = websocket
        self._loop = asyncio.get_running_loop()
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream(
            max_buffer_size=math.inf
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: str) -> None:
        """Enqueue ``message`` for delivery, from the loop or a worker thread."""

        if self._closed:
            msg = f"Connection {self.id} is closed"
            raise ConnectionClosedError(msg)

        if _current_loop() is self._loop:
            self._send_stream.send_nowait(message)
        else:
            self._loop.call_soon_threadsafe(self._enqueue, message)

    def close(self) -> None:
        """Stop accepting messages; already queued ones are still written."""

        if self._closed:
            return
        self._closed = True
        self._send_stream.close()

    async def run_writer(self) -> None:
        """Drain the outbound queue into the websocket until it is closed."""

        async with self._receive_stream:
            async for message in self._receive_stream:
                try:
                    await self._websocket.send_text(message)
                except Exception as exc:
                    logger.warning("Failed to write to websocket %s: %s", self.id, exc)
                    self.close()
                    return

    def _enqueue(self, message: str) -> None:
        if self._closed:
            logger.debug("Dropping message for closed connection %s", self.id)
            return
        self._send_stream.send_nowait(message)


def _current_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


__all__ = ["Connection", "ConnectionClosedError", "WebSocketConnection"]
