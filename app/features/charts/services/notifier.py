"""
Chart update notifiers.

`publish` never blocks and never raises: RedisNotifier hands the message to
a background task and logs delivery failures instead of surfacing them.
"""

import asyncio
import json
from typing import Any

from app.infrastructure.observability.logging import get_logger
from app.services.redis_client import FastRedisClient, fast_redis

logger = get_logger(__name__)


class RedisNotifier:
    """Publishes each event as JSON on a Redis pub/sub channel named after it."""

    def __init__(self, client: FastRedisClient | None = None):
        self._client = client or fast_redis
        self._pending: set[asyncio.Task] = set()

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        try:
            message = json.dumps(payload, default=str)
            task = asyncio.get_running_loop().create_task(self._send(event, message))
        except Exception as e:
            logger.warning("Failed to schedule chart notification", event_name=event, error=str(e))
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, event: str, message: str) -> None:
        try:
            receivers = await self._client.publish(event, message)
            logger.debug("Chart notification published", event_name=event, receivers=receivers)
        except Exception as e:
            logger.warning("Chart notification failed", event_name=event, error=str(e))

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight notifications; used on shutdown."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


class NullNotifier:
    def publish(self, event: str, payload: dict[str, Any]) -> None:
        logger.debug("Chart notification dropped", event_name=event)
