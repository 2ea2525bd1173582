"""Redis publisher service for game events.

Provides pub/sub functionality for multi-instance scaling.
When running multiple backend instances, game events are broadcast
through Redis so every instance can push them to its own WebSocket clients.
"""

import asyncio
import contextlib
import json
import logging
import time
from collections.abc import Callable, Coroutine
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from rook.config import settings

logger = logging.getLogger(__name__)

# Type for event handlers: (game_id, event)
EventHandler = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]

CHANNEL_PREFIX = "game_events:"


class PublisherService:
    """Service for publishing and subscribing to game events via Redis pub/sub.

    Implements the notifier contract: ``broadcast`` publishes to the game's
    channel and reports failures by raising, leaving it to the caller to log.
    """

    def __init__(self) -> None:
        """Initialize publisher service."""
        self.redis_client: redis.Redis | None = None
        self.pubsub: redis.client.PubSub | None = None
        self._handlers: dict[str, list[EventHandler]] = {}
        self._subscriber_task: asyncio.Task[None] | None = None
        self._running = False
        self._instance_id = f"instance_{int(time.time() * 1000)}"

    async def connect(self) -> None:
        """Connect to Redis and verify connection."""
        try:
            self.redis_client = redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            await self.redis_client.ping()
            logger.info("Connected to Redis (instance: %s)", self._instance_id)
        except (RedisError, TimeoutError, OSError):
            logger.warning("Redis not available, running without pub/sub")
            self.redis_client = None

    async def publish(self, channel: str, message: dict[str, Any]) -> None:
        """Publish message to Redis channel.

        Args:
            channel: Channel name
            message: Message payload

        Raises:
            RedisError: If Redis rejects the publish

        """
        if not self.redis_client:
            return

        # Tag with instance ID to prevent echo
        payload = {**message, "_instance_id": self._instance_id}
        await self.redis_client.publish(channel, json.dumps(payload))
        logger.debug("Published message to channel %s", channel)

    async def broadcast(self, game_id: str, event: dict[str, Any]) -> None:
        """Publish a game event to the game's channel."""
        await self.publish(f"{CHANNEL_PREFIX}{game_id}", event)

    async def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """Subscribe to a channel pattern.

        Args:
            pattern: Channel pattern (e.g., "game_events:*")
            handler: Async function called as ``handler(game_id, event)``
        """
        self._handlers.setdefault(pattern, []).append(handler)
        logger.info("Registered handler for pattern: %s", pattern)

    async def start_subscriber(self) -> None:
        """Start the background subscriber task."""
        if not self.redis_client or self._running:
            return

        self._running = True
        self.pubsub = self.redis_client.pubsub()

        for pattern in self._handlers:
            await self.pubsub.psubscribe(pattern)
            logger.info("Subscribed to pattern: %s", pattern)

        self._subscriber_task = asyncio.create_task(self._subscriber_loop())
        logger.info("Redis subscriber started")

    async def _subscriber_loop(self) -> None:
        """Background loop processing incoming messages."""
        while self._running and self.pubsub:
            try:
                message = await self.pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=1.0,
                )

                if message and message["type"] == "pmessage":
                    await self._handle_message(message)

            except asyncio.CancelledError:
                break
            except (RedisError, ConnectionError):
                logger.warning("Redis connection lost, attempting reconnect...")
                await asyncio.sleep(5)
                try:
                    await self.connect()
                    if self.redis_client:
                        self.pubsub = self.redis_client.pubsub()
                        for pattern in self._handlers:
                            await self.pubsub.psubscribe(pattern)
                except Exception:
                    logger.exception("Failed to reconnect to Redis")
            except Exception:
                logger.exception("Error in subscriber loop")
                await asyncio.sleep(1)

    async def _handle_message(self, message: dict[str, Any]) -> None:
        """Process an incoming pub/sub message.

        Args:
            message: Redis pub/sub message
        """
        pattern = message.get("pattern", "")
        try:
            event = json.loads(message.get("data", "{}"))
        except json.JSONDecodeError:
            logger.warning("Invalid JSON in pub/sub message")
            return

        # Skip messages from our own instance
        if event.pop("_instance_id", None) == self._instance_id:
            return

        game_id = event.get("game_id", "")
        for handler in self._handlers.get(pattern, []):
            try:
                await handler(game_id, event)
            except Exception:
                logger.exception("Error in event handler for game %s", game_id)

    async def stop_subscriber(self) -> None:
        """Stop the background subscriber task."""
        self._running = False

        if self._subscriber_task:
            self._subscriber_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._subscriber_task

        if self.pubsub:
            await self.pubsub.close()
            self.pubsub = None

        logger.info("Redis subscriber stopped")

    async def close(self) -> None:
        """Close Redis connection."""
        await self.stop_subscriber()

        if self.redis_client:
            await self.redis_client.close()
            logger.info("Redis connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        return self.redis_client is not None
