# =============================================================================
# tests/test_websocket.py - WebSocket Tests
# =============================================================================
# Tests for the local connection manager, the Redis relay and the room
# endpoint. Redis itself is mocked.
# =============================================================================

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.websocket import broadcast
from app.websocket.adapter import RedisWebSocketAdapter
from app.websocket.broadcast import WEBSOCKET_CHANNEL, decode_event, encode_event, publish_event
from app.websocket.manager import ConnectionManager


def _socket(fail: bool = False) -> MagicMock:
    websocket = MagicMock()
    websocket.accept = AsyncMock()
    websocket.send_json = AsyncMock(side_effect=RuntimeError("closed") if fail else None)
    return websocket


# =============================================================================
# ConnectionManager
# =============================================================================

class TestConnectionManager:

    def test_connect_and_disconnect(self):
        manager = ConnectionManager()
        websocket = _socket()

        asyncio.run(manager.connect("room-1", websocket))
        assert manager.get_connection_count() == 1
        assert manager.get_active_rooms() == ["room-1"]

        manager.disconnect("room-1", websocket)
        assert manager.get_connection_count() == 0
        assert manager.get_active_rooms() == []

    def test_broadcast_drops_dead_sockets(self):
        manager = ConnectionManager()
        alive, dead = _socket(), _socket(fail=True)

        async def scenario():
            await manager.connect("room-1", alive)
            await manager.connect("room-1", dead)
            return await manager.broadcast("room-1", {"type": "ping"})

        sent = asyncio.run(scenario())

        assert sent == 1
        alive.send_json.assert_awaited_once_with({"type": "ping"})
        assert manager.get_connection_count() == 1

    def test_broadcast_to_empty_room(self):
        assert asyncio.run(ConnectionManager().broadcast("nobody", {"type": "x"})) == 0


# =============================================================================
# Event Encoding / Publishing
# =============================================================================

class TestEvents:

    def test_encode_then_decode_splits_room(self):
        room, data = decode_event(encode_event("verifications", "verifications_purged", {"deleted": 2}))

        assert room == "verifications"
        assert data == {"type": "verifications_purged", "deleted": 2}

    def test_decode_rejects_non_object(self):
        with pytest.raises(ValueError):
            decode_event("[1, 2]")

    def test_publish_event(self):
        client = MagicMock()
        with patch.object(broadcast, "get_redis_client", return_value=client):
            assert publish_event("verifications", "verifications_purged", {"deleted": 1}) is True

        channel, payload = client.publish.call_args.args
        assert channel == WEBSOCKET_CHANNEL
        assert json.loads(payload)["room"] == "verifications"

    def test_publish_event_swallows_redis_errors(self):
        client = MagicMock()
        client.publish.side_effect = ConnectionError("redis down")
        with patch.object(broadcast, "get_redis_client", return_value=client):
            assert publish_event("verifications", "x", {}) is False


# =============================================================================
# RedisWebSocketAdapter
# =============================================================================

class TestRedisWebSocketAdapter:

    def _adapter(self):
        manager = MagicMock(spec=ConnectionManager)
        manager.broadcast = AsyncMock(return_value=1)
        return RedisWebSocketAdapter("redis://localhost:6379/15", manager), manager

    def test_relays_messages_to_local_room(self):
        adapter, manager = self._adapter()
        message = {"type": "message", "data": encode_event("room-1", "created", {"id": "v1"})}

        asyncio.run(adapter.handle_message(message))

        manager.broadcast.assert_awaited_once_with("room-1", {"type": "created", "id": "v1"})

    def test_ignores_subscribe_confirmations(self):
        adapter, manager = self._adapter()

        asyncio.run(adapter.handle_message({"type": "subscribe", "data": 1}))

        manager.broadcast.assert_not_awaited()

    def test_ignores_invalid_payload(self):
        adapter, manager = self._adapter()

        asyncio.run(adapter.handle_message({"type": "message", "data": b"not json"}))

        manager.broadcast.assert_not_awaited()

    def test_publish_uses_shared_channel(self):
        adapter, _ = self._adapter()
        client = MagicMock()
        client.publish = AsyncMock(return_value=2)
        adapter._client = client

        receivers = asyncio.run(adapter.publish("room-1", "created", {"id": "v1"}))

        assert receivers == 2
        assert client.publish.await_args.args[0] == WEBSOCKET_CHANNEL


# =============================================================================
# Endpoint
# =============================================================================

class TestRoomEndpoint:

    def test_connect_and_ping(self, client):
        with client.websocket_connect("/api/ws/verifications") as websocket:
            assert websocket.receive_json()["type"] == "connected"
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"

    def test_status(self, client):
        response = client.get("/api/ws/status")

        assert response.status_code == 200
        assert set(response.json()) == {"total_connections", "active_rooms", "room_count"}

    def test_not_mounted_in_worker_mode(self, worker_client):
        assert worker_client.get("/api/ws/status").status_code == 404
