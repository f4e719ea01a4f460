# =============================================================================
# app/websocket/broadcast.py - Cross-Process Publishing
# =============================================================================
# Lets any process (API server or Celery worker) publish an event that every
# API process relays to its WebSocket clients.
#
# Uses Redis pub/sub:
# - publishers call publish_event()
# - each API process runs a RedisWebSocketAdapter listener
# =============================================================================

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Redis channel for WebSocket events
WEBSOCKET_CHANNEL = "authgate:websocket:events"


def encode_event(room: str, event_type: str, data: dict[str, Any]) -> str:
    """Serialize an event for the pub/sub channel."""
    return json.dumps({
        "room": room,
        "type": event_type,
        **data
    }, default=str)


def decode_event(raw: bytes | str) -> tuple[str | None, dict[str, Any]]:
    """
    Parse a pub/sub message.

    Returns:
        (room, message) where the room key has been removed from the message

    Raises:
        ValueError: If the payload isn't a JSON object
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Event payload must be a JSON object")
    room = data.pop("room", None)
    return room, data


def get_redis_client():
    """Get a Redis client for pub/sub operations."""
    import redis
    from app.config import settings
    return redis.from_url(settings.REDIS_URL)


def publish_event(room: str, event_type: str, data: dict[str, Any]) -> bool:
    """
    Publish an event that will be broadcast to WebSocket clients.

    Safe to call from Celery workers: failures are logged, not raised.

    Args:
        room: The room to broadcast to
        event_type: Event type (e.g. verifications_purged)
        data: Event data to include

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()
        client.publish(WEBSOCKET_CHANNEL, encode_event(room, event_type, data))

        logger.debug(f"Published {event_type} event for room {room}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish event: {e}")
        return False
