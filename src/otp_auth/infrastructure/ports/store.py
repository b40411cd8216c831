from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class KeyValueStorePort(Protocol):
    """
    Protocol for the shared key-value store holding all OTP state.

    Each operation is individually atomic; nothing here is wrapped in a
    cross-key transaction. Expiry is enforced by the store itself.

    Implementations: Redis (production), in-memory (development/testing).
    """

    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent/expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Store value under key, replacing any previous value and TTL."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        ...

    async def increment(self, key: str) -> int:
        """Atomically increment an integer counter, creating it at 1."""
        ...

    async def expire(self, key: str, ttl_seconds: int) -> None:
        """Set the time-to-live of an existing key."""
        ...

    async def ttl(self, key: str) -> int:
        """
        Seconds remaining before key expires.

        Returns -2 if the key does not exist and -1 if it has no expiry,
        following Redis semantics.
        """
        ...
