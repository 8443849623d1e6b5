"""WorkQueue: Redis sorted set FIFO queues for named jobs."""

from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis

from statusflow.queue.schemas import QueueMessage


class WorkQueue:
    """Durable named-job queues backed by Redis sorted sets.

    One sorted set per queue name. Members are JSON envelopes scored by an
    atomic per-queue counter, so dequeue order is enqueue order.
    """

    KEY_PREFIX = "queue:"

    def __init__(self, redis: Redis):
        self.redis = redis

    def _pending_key(self, queue_name: str) -> str:
        return f"{self.KEY_PREFIX}{queue_name}:pending"

    def _counter_key(self, queue_name: str) -> str:
        return f"{self.KEY_PREFIX}{queue_name}:counter"

    async def enqueue(
        self,
        queue_name: str,
        job_type: str,
        payload: dict[str, Any],
        now: datetime | None = None,
    ) -> QueueMessage:
        """Add a named job to a queue.

        Args:
            queue_name: Target queue (e.g. "scheduled-jobs", "email")
            job_type: Message name the consumer dispatches on
            payload: JSON-serializable job data
            now: Current time (for deterministic testing)

        Returns:
            The stored QueueMessage envelope
        """
        now = now or datetime.now(UTC)

        # Atomic counter for FIFO ordering
        counter = await self.redis.incr(self._counter_key(queue_name))

        message = QueueMessage(
            id=str(counter),
            name=job_type,
            data=payload,
            enqueued_at=now.isoformat(),
        )
        await self.redis.zadd(self._pending_key(queue_name), {message.model_dump_json(): counter})
        return message

    async def dequeue(self, queue_name: str) -> QueueMessage | None:
        """Remove and return the oldest message, or None if the queue is empty."""
        result = await self.redis.zpopmin(self._pending_key(queue_name), count=1)
        if not result:
            return None

        raw, _score = result[0]
        return QueueMessage.model_validate_json(raw)

    async def get_length(self, queue_name: str) -> int:
        """Return current queue size."""
        return await self.redis.zcard(self._pending_key(queue_name))
