"""Redis pool shared by the work queues and the analytics channel."""

import redis.asyncio as redis

from statusflow.core.config import get_settings

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None) -> None:
    """Connect once per process; fails fast if Redis is unreachable."""
    global _redis

    if _redis is not None:
        return

    client = redis.from_url(url or get_settings().redis_url, encoding="utf-8", decode_responses=True)
    await client.ping()
    _redis = client


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """Raises RuntimeError before init_redis()."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
