"""WebSocket connection manager and inbound message dispatch."""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from fastapi import WebSocket
from pydantic import BaseModel, ValidationError

from slipdeck.core.errors import MessagePayloadError, error_context, handle_errors
from slipdeck.models import QueueItem
from slipdeck.services.download_matcher import PortalDownloadsStore

logger = logging.getLogger(__name__)

QUEUE_STATE = "queue:state"


class ConnectionManager:
    """Manages WebSocket connections for broadcasting updates."""

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self.active_connections.append(websocket)
        logger.info(f"Client connected. Total connections: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection."""
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)
        logger.info(f"Client disconnected. Total connections: {len(self.active_connections)}")

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Broadcast a message to all connected clients."""
        if not self.active_connections:
            return

        json_message = json.dumps(message)
        disconnected = []

        async with self._lock:
            for connection in self.active_connections:
                try:
                    await connection.send_text(json_message)
                except Exception as e:
                    logger.warning(f"Failed to send message: {e}")
                    disconnected.append(connection)

            for conn in disconnected:
                self.active_connections.remove(conn)

    async def broadcast_portal_downloads(self, downloads: list[dict]) -> None:
        """Broadcast the matched download list to portal clients."""
        await self.broadcast({"type": "portal_downloads", "downloads": downloads})

    async def broadcast_migration_summary(self, summary: dict) -> None:
        """Broadcast recomputed migration preview counts."""
        await self.broadcast({"type": "migration_summary", "summary": summary})


class QueuePayload(BaseModel):
    """Payload of a ``queue:state`` message."""

    items: list[QueueItem] = []


def parse_message(raw: str) -> dict[str, Any]:
    """Decode a WebSocket text frame into a ``{"type", "payload"}`` dict."""
    with error_context(
        error_types=(json.JSONDecodeError,),
        default_message="Malformed WebSocket frame",
        log_level="warning",
        wrap_as=MessagePayloadError,
    ):
        message = json.loads(raw)
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        raise MessagePayloadError("WebSocket message has no string type")
    return message


@handle_errors(
    error_types=(ValidationError,),
    default_message="Invalid queue:state payload",
    log_level="warning",
    wrap_as=MessagePayloadError,
)
def parse_queue_payload(payload: Any) -> list[QueueItem]:
    return QueuePayload.model_validate(payload or {}).items


class MessageDispatcher:
    """Routes inbound messages to the state containers.

    Returns True when a message changed state that browser clients
    should be told about.
    """

    def __init__(self, downloads: PortalDownloadsStore):
        self._downloads = downloads
        self._handlers: dict[str, Callable[[Any], None]] = {
            QUEUE_STATE: self._handle_queue_state,
        }

    def dispatch(self, message: dict[str, Any]) -> bool:
        handler = self._handlers.get(message.get("type"))
        if handler is None:
            logger.debug(f"Ignoring WebSocket message type: {message.get('type')}")
            return False
        handler(message.get("payload"))
        return True

    def _handle_queue_state(self, payload: Any) -> None:
        items = parse_queue_payload(payload)
        self._downloads.set_queue(items)
        logger.debug(
            f"Queue state: {len(items)} item(s), {len(self._downloads.matches)} matched"
        )


# Singleton instance
manager = ConnectionManager()
