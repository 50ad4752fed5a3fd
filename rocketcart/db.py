"""
Redis client for cart snapshots.

Provides a lazily created Upstash Redis client shared by the process.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from rocketcart.config import Settings, load_settings
from rocketcart.errors import ERROR_STORE_NOT_CONFIGURED

_redis_client: Optional[AsyncRedis] = None


def get_redis(settings: Optional[Settings] = None) -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses the standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or load_settings()
        if not settings.redis_url or not settings.redis_token:
            raise ValueError(ERROR_STORE_NOT_CONFIGURED)
        _redis_client = AsyncRedis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def reset_redis() -> None:
    """Drop the cached client so the next call rebuilds it."""
    global _redis_client
    _redis_client = None


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"
