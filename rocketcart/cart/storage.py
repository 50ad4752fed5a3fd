"""Snapshot stores for the cart and the startup loader."""
from typing import Optional, Protocol

from rocketcart.db import RedisKeys, get_redis
from rocketcart.errors import ERROR_STORE_WRITE_REJECTED, PersistenceError
from rocketcart.logging import get_logger, sanitize_id_for_logging
from .models import CartLine, CartLines, parse_snapshot

logger = get_logger(__name__)


class CartStore(Protocol):
    """Key-value store holding the serialized cart."""

    async def get(self, key: str) -> Optional[str | bytes]:
        ...

    async def set(self, key: str, value: str) -> None:
        """Write the snapshot. Raises PersistenceError on failure."""
        ...


class MemoryCartStore:
    """In-process store for development, tests, and single-run tools."""

    def __init__(self, initial: Optional[dict] = None):
        self._store: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value
        logger.debug(f"Cart snapshot {key} stored in memory ({len(value)} bytes)")


class RedisCartStore:
    """
    Upstash Redis store.

    Keys are namespaced with ``RedisKeys.cart_key``. ``ttl_seconds`` of None keeps
    the snapshot until it is overwritten.
    """

    def __init__(self, redis=None, ttl_seconds: Optional[int] = None):
        self._redis = redis  # Lazy initialization
        self.ttl_seconds = ttl_seconds

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def get(self, key: str) -> Optional[str | bytes]:
        # Bytes are decoded by parse_snapshot so bad encodings count as corruption
        return await self.redis.get(RedisKeys.cart_key(key))

    async def set(self, key: str, value: str) -> None:
        try:
            result = await self.redis.set(RedisKeys.cart_key(key), value, ex=self.ttl_seconds)
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise PersistenceError(f"Cart store unavailable: {e!s}") from e
        # upstash returns a falsy value when the write did not happen
        if not result:
            raise PersistenceError(ERROR_STORE_WRITE_REJECTED)


def _enforce_invariants(lines: list[CartLine]) -> CartLines:
    """Drop lines that could not have been committed (amount < 1, repeated product)."""
    kept: list[CartLine] = []
    seen = set()
    for line in lines:
        if line.amount < 1:
            logger.warning(
                f"Dropping stored line for product {sanitize_id_for_logging(line.product_id)} "
                f"with amount {line.amount}"
            )
            continue
        if line.product_id in seen:
            logger.warning(
                f"Dropping duplicate stored line for product {sanitize_id_for_logging(line.product_id)}"
            )
            continue
        seen.add(line.product_id)
        kept.append(line)
    return tuple(kept)


async def load_cart(store: CartStore, key: str) -> CartLines:
    """
    Rebuild the cart from the stored snapshot.

    A missing or unreadable snapshot means "no saved cart" and yields an empty
    cart. Store read errors are not swallowed.
    """
    raw = await store.get(key)
    if not raw:
        return ()

    try:
        lines = parse_snapshot(raw)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Corrupted cart snapshot under {key!r}, starting empty: {e}")
        return ()

    return _enforce_invariants(lines)
