"""Shared key-value cache interface.

Session state that must be visible to every API process (current refresh
token per subject, revoked access tokens, rate-limit counters) lives in a
cache with per-key time-to-live. The core only relies on the operations
below; two of them must be atomic against the shared store:

- ``compare_and_replace``: read, compare and write as one indivisible step
- ``increment``: counter increment that never loses an update

Implementations raise ``InfrastructureError`` when the store is
unreachable or a call times out. They never translate a failure into an
empty result.
"""

from abc import ABC, abstractmethod


class ICache(ABC):
    """Contract for the TTL-bearing cache shared by all session components."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored at ``key`` or None if absent or expired."""
        pass

    @abstractmethod
    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` at ``key``, expiring after ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""
        pass

    @abstractmethod
    async def compare_and_replace(
        self,
        key: str,
        expected: str,
        new: str | None,
        ttl_seconds: int,
    ) -> bool:
        """
        Atomically replace the value at ``key`` if it equals ``expected``.

        Args:
            key: Cache key
            expected: Value that must currently be stored
            new: Replacement value, or None to delete the key
            ttl_seconds: TTL applied to the replacement value

        Returns:
            True if the swap happened, False if the current value differed
            (including when the key is absent)
        """
        pass

    @abstractmethod
    async def increment(self, key: str, ttl_seconds_if_new: int) -> int:
        """
        Atomically increment the counter at ``key``.

        A missing key starts at 1 and gets ``ttl_seconds_if_new``; an
        existing key keeps its original expiry.

        Returns:
            Counter value after the increment
        """
        pass
