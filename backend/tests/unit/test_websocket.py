"""Unit tests for the WebSocket layer.

Tests connection lifecycle, broadcasting, and inbound message dispatch.
"""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi import WebSocket
from fastapi.testclient import TestClient

from slipdeck.api.routes import get_broadcaster
from slipdeck.api.websocket import (
    QUEUE_STATE,
    ConnectionManager,
    MessageDispatcher,
    manager,
    parse_message,
    parse_queue_payload,
)
from slipdeck.core.errors import MessagePayloadError
from slipdeck.main import app
from slipdeck.services.download_matcher import PortalDownloadsStore
from slipdeck.services.event_broadcaster import EventBroadcaster
from tests.conftest import make_request


@pytest.fixture
def connection_manager():
    """Create a fresh ConnectionManager instance."""
    return ConnectionManager()


@pytest.fixture
def mock_websocket():
    """Create a mock WebSocket connection."""
    ws = AsyncMock(spec=WebSocket)
    ws.accept = AsyncMock()
    ws.send_text = AsyncMock()
    return ws


@pytest.mark.asyncio
class TestConnectionLifecycle:
    """Test WebSocket connection lifecycle management."""

    async def test_connect_adds_client(self, connection_manager, mock_websocket):
        await connection_manager.connect(mock_websocket)

        assert connection_manager.active_connections == [mock_websocket]
        mock_websocket.accept.assert_called_once()

    async def test_disconnect_removes_client(self, connection_manager, mock_websocket):
        await connection_manager.connect(mock_websocket)
        await connection_manager.disconnect(mock_websocket)

        assert connection_manager.active_connections == []

    async def test_disconnect_idempotent(self, connection_manager, mock_websocket):
        """Disconnecting a non-connected client is safe."""
        await connection_manager.disconnect(mock_websocket)
        assert connection_manager.active_connections == []


@pytest.mark.asyncio
class TestBroadcasting:
    """Test message broadcasting."""

    async def test_broadcast_without_clients_is_noop(self, connection_manager):
        await connection_manager.broadcast({"type": "anything"})

    async def test_broadcast_sends_json(self, connection_manager, mock_websocket):
        await connection_manager.connect(mock_websocket)

        await connection_manager.broadcast_portal_downloads([{"id": "a", "requestId": 1}])

        sent = json.loads(mock_websocket.send_text.call_args[0][0])
        assert sent == {"type": "portal_downloads", "downloads": [{"id": "a", "requestId": 1}]}

    async def test_migration_summary_message(self, connection_manager, mock_websocket):
        await connection_manager.connect(mock_websocket)

        await connection_manager.broadcast_migration_summary({"conflicts": 2})

        sent = json.loads(mock_websocket.send_text.call_args[0][0])
        assert sent["type"] == "migration_summary"
        assert sent["summary"] == {"conflicts": 2}

    async def test_failed_client_is_removed(self, connection_manager, mock_websocket):
        broken = AsyncMock(spec=WebSocket)
        broken.send_text = AsyncMock(side_effect=RuntimeError("socket closed"))
        await connection_manager.connect(mock_websocket)
        await connection_manager.connect(broken)

        await connection_manager.broadcast({"type": "ping"})

        assert connection_manager.active_connections == [mock_websocket]
        mock_websocket.send_text.assert_called_once()


class TestParseMessage:
    """Tests for inbound frame decoding."""

    def test_valid_message(self):
        message = parse_message('{"type": "queue:state", "payload": {"items": []}}')
        assert message["type"] == QUEUE_STATE

    def test_malformed_json(self):
        with pytest.raises(MessagePayloadError):
            parse_message("{not json")

    def test_missing_type(self):
        with pytest.raises(MessagePayloadError):
            parse_message('{"payload": {}}')

    def test_non_string_type(self):
        with pytest.raises(MessagePayloadError):
            parse_message('{"type": {"x": 1}, "payload": {}}')

    def test_non_object(self):
        with pytest.raises(MessagePayloadError):
            parse_message("[1, 2, 3]")

    def test_invalid_queue_payload(self):
        with pytest.raises(MessagePayloadError):
            parse_queue_payload({"items": [{"id": "a", "title": "No client id"}]})

    def test_queue_payload_reads_camel_case(self):
        items = parse_queue_payload(
            {
                "items": [
                    {
                        "id": "a",
                        "clientId": 2,
                        "title": "Heat.1995",
                        "mediaType": "movie",
                        "movieId": 12,
                    }
                ]
            }
        )
        assert items[0].client_id == 2
        assert items[0].movie_id == 12

    def test_missing_payload_is_empty_queue(self):
        assert parse_queue_payload(None) == []


class TestMessageDispatcher:
    """Tests for routing inbound messages to the stores."""

    @pytest.fixture
    def store(self):
        store = PortalDownloadsStore()
        store.set_user_requests([make_request(1, "Heat")])
        return store

    def test_queue_state_updates_store(self, store):
        dispatcher = MessageDispatcher(store)

        changed = dispatcher.dispatch(
            {
                "type": QUEUE_STATE,
                "payload": {
                    "items": [
                        {"id": "z", "clientId": 1, "title": "Heat.1995", "mediaType": "movie"}
                    ]
                },
            }
        )

        assert changed is True
        assert [i.id for i in store.queue] == ["z"]
        assert store.matches["z"].request_id == 1

    def test_unknown_type_is_ignored(self, store):
        dispatcher = MessageDispatcher(store)

        assert dispatcher.dispatch({"type": "movie:added", "payload": {}}) is False
        assert store.queue == []

    def test_bad_payload_leaves_state_alone(self, store):
        dispatcher = MessageDispatcher(store)

        with pytest.raises(MessagePayloadError):
            dispatcher.dispatch({"type": QUEUE_STATE, "payload": {"items": [{"id": "z"}]}})

        assert store.queue == []


class TestWebSocketEndpoint:
    """Tests for the /ws endpoint's handling of rejected frames."""

    def test_bad_type_keeps_connection_open(self, downloads_store):
        app.dependency_overrides[get_broadcaster] = lambda: EventBroadcaster(manager)
        downloads_store.set_user_requests([make_request(1, "Heat")])
        item = {"id": "a", "clientId": 1, "title": "Heat.1995", "mediaType": "movie"}

        with TestClient(app).websocket_connect("/ws") as ws:
            ws.send_json({"type": {"x": 1}, "payload": {}})
            ws.send_json({"type": QUEUE_STATE, "payload": {"items": [item]}})

            message = ws.receive_json()
            assert [d["requestId"] for d in message["downloads"]] == [1]
            assert len(manager.active_connections) == 1

        assert [i.id for i in downloads_store.queue] == ["a"]
