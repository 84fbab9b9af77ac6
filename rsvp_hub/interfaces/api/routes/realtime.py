"""Websocket endpoint that streams event and RSVP changes."""

from __future__ import annotations

import logging

import anyio
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from rsvp_hub.infrastructure.realtime import (
    ConnectionLifecycleHandler,
    PubSub,
    WebSocketConnection,
)
from rsvp_hub.interfaces.api.dependencies import get_channel_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/_ws")
async def realtime_websocket(
    websocket: WebSocket,
    registry: PubSub = Depends(get_channel_registry),
) -> None:
    """Accept subscriptions and push updates for the subscribed topics.

    Reading and writing run as two tasks so that a slow client never holds up
    the publishers; when the client goes away every subscription is dropped.
    """

    await websocket.accept()
    connection = WebSocketConnection(websocket)
    handler = ConnectionLifecycleHandler(connection, registry)
    logger.info("Realtime connection %s opened", connection.id)

    try:
        async with anyio.create_task_group() as task_group:
            task_group.start_soon(connection.run_writer)
            await _read_messages(websocket, handler)
            task_group.cancel_scope.cancel()
    finally:
        handler.close()
        connection.close()


async def _read_messages(websocket: WebSocket, handler: ConnectionLifecycleHandler) -> None:
    while True:
        try:
            message = await websocket.receive()
        except WebSocketDisconnect:
            return
        if message["type"] == "websocket.disconnect":
            return

        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes") or b""
        try:
            handler.handle_message(raw)
        except Exception as exc:
            handler.fail(exc)
            return
