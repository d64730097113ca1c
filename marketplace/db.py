"""
Storage Module - Durable key-value stores for the cart

Provides:
- KeyValueStore: the get/set string contract the cart persists through
- RedisStore: Upstash Redis adapter (production)
- MemoryStore: in-process store (local runs, tests)
- get_redis: async Upstash Redis client singleton
"""

from typing import Optional, Protocol, runtime_checkable

from upstash_redis.asyncio import Redis as AsyncRedis

from marketplace import config
from marketplace.errors import StorageError


class StorageKeys:
    """Keys used in the durable store."""

    # Full cart collection, JSON array of line items
    CART_PRODUCTS = config.CART_STORAGE_KEY


@runtime_checkable
class KeyValueStore(Protocol):
    """Opaque string store the cart is mirrored to."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


class RedisStore:
    """KeyValueStore backed by Upstash Redis."""

    def __init__(self, client: Optional[AsyncRedis] = None):
        self._redis = client  # Lazy initialization

    @property
    def redis(self) -> AsyncRedis:
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.redis.get(key)
        except Exception as e:
            raise StorageError("get", key, e) from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.redis.set(key, value)
        except Exception as e:
            raise StorageError("set", key, e) from e


class MemoryStore:
    """In-process KeyValueStore."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data
