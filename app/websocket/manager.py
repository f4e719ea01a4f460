# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Manages the WebSocket connections held by THIS process, grouped by room.
# Cross-process delivery is handled by RedisWebSocketAdapter, which feeds
# events from every process into broadcast().
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect(room, websocket)
#   await websocket_manager.broadcast(room, {"type": "verifications_purged", ...})
#   websocket_manager.disconnect(room, websocket)
# =============================================================================

import logging
from typing import Dict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by room name.

    Each room can have multiple connected clients. When an event occurs for a
    room, it's broadcast to all of them.
    """

    def __init__(self):
        # room -> set of WebSocket connections
        self.connections: Dict[str, Set[WebSocket]] = {}
        self._total_connections = 0

    async def connect(self, room: str, websocket: WebSocket) -> None:
        """
        Accept a new WebSocket connection and track it.

        Args:
            room: The room this connection listens to
            websocket: The WebSocket connection
        """
        await websocket.accept()

        self.connections.setdefault(room, set()).add(websocket)
        self._total_connections += 1

        logger.info(
            f"WebSocket joined room {room}. "
            f"Total connections: {self._total_connections}"
        )

    def disconnect(self, room: str, websocket: WebSocket) -> None:
        """Remove a WebSocket connection from tracking."""
        sockets = self.connections.get(room)
        if sockets is not None and websocket in sockets:
            sockets.discard(websocket)
            self._total_connections -= 1

            if not sockets:
                del self.connections[room]

        logger.info(
            f"WebSocket left room {room}. "
            f"Total connections: {self._total_connections}"
        )

    async def broadcast(self, room: str, message: dict) -> int:
        """
        Send a message to every local connection in a room.

        Connections that fail to receive are dropped.

        Returns:
            int: Number of clients the message was sent to
        """
        if room not in self.connections:
            logger.debug(f"No connections for room {room}, skipping broadcast")
            return 0

        dead_connections: Set[WebSocket] = set()
        sent_count = 0

        for websocket in list(self.connections[room]):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead_connections.add(websocket)

        for ws in dead_connections:
            self.connections[room].discard(ws)
            self._total_connections -= 1

        if dead_connections:
            logger.info(f"Cleaned up {len(dead_connections)} dead connections")

        if room in self.connections and not self.connections[room]:
            del self.connections[room]

        logger.debug(
            f"Broadcast to room {room}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )

        return sent_count

    def get_connection_count(self, room: str | None = None) -> int:
        """Connections in one room, or in total when no room is given."""
        if room:
            return len(self.connections.get(room, set()))
        return self._total_connections

    def get_active_rooms(self) -> list[str]:
        """Rooms with at least one local connection."""
        return list(self.connections.keys())


# Global singleton instance
websocket_manager = ConnectionManager()
