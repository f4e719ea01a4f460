# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Provides real-time room events, shared across processes through Redis.
#
# Usage:
#   # Broadcast to this process's connections
#   from app.websocket import websocket_manager
#   await websocket_manager.broadcast(room, {"type": "...", ...})
#
#   # Publish to every process (also from Celery workers)
#   from app.websocket import publish_event
#   publish_event(room, "verifications_purged", {"deleted": 3})
# =============================================================================

from app.websocket.adapter import RedisWebSocketAdapter
from app.websocket.broadcast import WEBSOCKET_CHANNEL, publish_event
from app.websocket.manager import ConnectionManager, websocket_manager

__all__ = [
    "ConnectionManager",
    "RedisWebSocketAdapter",
    "WEBSOCKET_CHANNEL",
    "publish_event",
    "websocket_manager",
]
