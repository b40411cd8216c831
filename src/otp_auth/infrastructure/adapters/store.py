"""
Key-Value Store Adapters.

Provides backends for short-lived OTP state:
- InMemoryKeyValueStore: For development/testing
- RedisKeyValueStore: For production (fast, distributed, native TTL)
"""

import math
import time
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from otp_auth.infrastructure.ports.store import KeyValueStorePort


logger = logging.getLogger("otp_auth.infrastructure.adapters.store")


# ═══════════════════════════════════════════════════════════════
# IN-MEMORY STORE (Development/Testing)
# ═══════════════════════════════════════════════════════════════


class InMemoryKeyValueStore(KeyValueStorePort):
    """
    In-memory implementation of KeyValueStorePort.

    Expiry is evaluated lazily against ``clock`` on every access, so
    tests can move time forward without sleeping.

    Usage:
        store = InMemoryKeyValueStore()
        await store.set("otp:login:user@example.com", "123456", ttl_seconds=300)
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        # Key -> (value, absolute expiry or None)
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}

    def _live(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (str(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def increment(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            self._data[key] = ("1", None)
            return 1
        value, expires_at = entry
        new_value = int(value) + 1
        # Incrementing keeps the existing expiry, like Redis INCR
        self._data[key] = (str(new_value), expires_at)
        return new_value

    async def expire(self, key: str, ttl_seconds: int) -> None:
        entry = self._live(key)
        if entry is not None:
            self._data[key] = (entry[0], self._clock() + ttl_seconds)

    async def ttl(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            return -2
        expires_at = entry[1]
        if expires_at is None:
            return -1
        return max(1, math.ceil(expires_at - self._clock()))

    def clear(self) -> None:
        """Clear all keys (for testing)."""
        self._data.clear()


# ═══════════════════════════════════════════════════════════════
# REDIS STORE (Production)
# ═══════════════════════════════════════════════════════════════


class RedisKeyValueStore(KeyValueStorePort):
    """
    Redis implementation of KeyValueStorePort.

    Production-ready with automatic expiration via Redis TTL.
    Connection errors are not caught: callers fail closed.

    Requires: redis[hiredis]

    Usage:
        import redis.asyncio as redis

        client = redis.Redis.from_url("redis://localhost:6379")
        store = RedisKeyValueStore(client)
    """

    def __init__(self, redis_client: Any, prefix: str = ""):
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        value = await self._redis.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if ttl_seconds:
            await self._redis.set(self._key(key), value, ex=ttl_seconds)
        else:
            await self._redis.set(self._key(key), value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def increment(self, key: str) -> int:
        return int(await self._redis.incr(self._key(key)))

    async def expire(self, key: str, ttl_seconds: int) -> None:
        await self._redis.expire(self._key(key), ttl_seconds)

    async def ttl(self, key: str) -> int:
        result = await self._redis.ttl(self._key(key))
        return int(result) if result is not None else -2


__all__ = [
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]
