"""Status change analytics events published on Redis Pub/Sub."""

import json
from datetime import UTC, datetime
from typing import Protocol

import structlog
from redis.asyncio import Redis

logger = structlog.get_logger(__name__)


class AnalyticsSink(Protocol):
    async def status_updated(self, uuid: str | None, type_name: str, status: str) -> None: ...


class RedisAnalyticsSink:
    """Publishes status change events for the analytics consumer.

    Fire-and-forget: publish failures are logged and never raised.
    """

    def __init__(self, redis: Redis, channel: str):
        self.redis = redis
        self.channel = channel

    async def status_updated(self, uuid: str | None, type_name: str, status: str) -> None:
        event = {
            "type": "status.updated",
            "uuid": uuid,
            "entity_type": type_name,
            "status": status,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        try:
            await self.redis.publish(self.channel, json.dumps(event))
        except Exception as exc:
            logger.warning(
                "analytics_publish_failed",
                channel=self.channel,
                entity_type=type_name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
