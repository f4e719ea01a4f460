# =============================================================================
# app/websocket/adapter.py - Redis-Backed WebSocket Adapter
# =============================================================================
# Shares WebSocket state across processes. Every API process subscribes to
# one Redis channel and relays whatever arrives to its own connections, so a
# client connected to process A sees events published by process B or by a
# Celery worker.
#
# Usage:
#   adapter = RedisWebSocketAdapter(settings.REDIS_URL, websocket_manager)
#   await adapter.start()
#   await adapter.publish("verifications", "created", {"id": "..."})
#   await adapter.stop()
# =============================================================================

import asyncio
import logging
from typing import Any

import redis.asyncio as aioredis

from app.websocket.broadcast import WEBSOCKET_CHANNEL, decode_event, encode_event
from app.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)


class RedisWebSocketAdapter:
    """
    Bridge between Redis pub/sub and the local ConnectionManager.

    Args:
        redis_url: Redis connection URL
        manager: Local connection manager to deliver events to
        channel: Pub/sub channel shared by all processes
    """

    def __init__(
        self,
        redis_url: str,
        manager: ConnectionManager,
        channel: str = WEBSOCKET_CHANNEL,
    ):
        self.redis_url = redis_url
        self.manager = manager
        self.channel = channel
        self._client: aioredis.Redis | None = None
        self._task: asyncio.Task | None = None
        self._shutdown_event = asyncio.Event()

    def _get_client(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(self.redis_url)
        return self._client

    async def publish(self, room: str, event_type: str, data: dict[str, Any]) -> int:
        """
        Publish an event to every process.

        Returns:
            Number of subscribers that received it
        """
        return await self._get_client().publish(
            self.channel, encode_event(room, event_type, data)
        )

    async def handle_message(self, message: dict[str, Any]) -> None:
        """Deliver one pub/sub message to local connections."""
        if message.get("type") != "message":
            return

        try:
            room, data = decode_event(message["data"])
        except ValueError as e:
            logger.warning(f"Invalid JSON in Redis message: {e}")
            return

        if room:
            await self.manager.broadcast(room, data)
            logger.debug(f"Relayed {data.get('type')} to room {room}")

    async def listen(self) -> None:
        """
        Background task: subscribe and relay until stopped.
        """
        logger.info("Starting Redis pub/sub listener for WebSocket broadcasts")

        pubsub = self._get_client().pubsub()
        try:
            await pubsub.subscribe(self.channel)

            async for message in pubsub.listen():
                if self._shutdown_event.is_set():
                    break
                try:
                    await self.handle_message(message)
                except Exception as e:
                    logger.error(f"Error processing Redis message: {e}")

        except asyncio.CancelledError:
            logger.info("Redis pub/sub listener cancelled")
        except Exception as e:
            logger.error(f"Redis pub/sub listener error: {e}")
        finally:
            try:
                await pubsub.unsubscribe(self.channel)
                await pubsub.aclose()
            except Exception as e:
                logger.debug(f"Error closing pub/sub: {e}")

    async def start(self) -> None:
        if self._task is not None:
            return
        self._shutdown_event.clear()
        self._task = asyncio.create_task(self.listen())

    async def stop(self) -> None:
        self._shutdown_event.set()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client is not None:
            await self._client.aclose()
            self._client = None

        logger.info("Redis WebSocket adapter stopped")
