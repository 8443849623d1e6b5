"""Shared test fixtures for all test groups."""

import pytest
from fakeredis import aioredis

from statusflow.queue.work_queue import WorkQueue


@pytest.fixture
async def redis_client():
    """Fake Redis client, flushed after each test."""
    client = aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
async def work_queue(redis_client):
    """WorkQueue backed by fake Redis."""
    return WorkQueue(redis_client)


@pytest.fixture
def drain_queue(work_queue):
    """Dequeue every pending message of a queue, oldest first."""

    async def _drain(queue_name: str) -> list:
        messages = []
        while (message := await work_queue.dequeue(queue_name)) is not None:
            messages.append(message)
        return messages

    return _drain
