"""In-process implementation of the shared session cache.

Suitable for development, tests and single-worker deployments only:
state is lost on restart and not shared between processes. Use
RedisCache whenever more than one worker serves requests.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta

from authcore.domain.repositories.cache import ICache
from authcore.domain.services.clock import IClock


@dataclass
class _Entry:
    value: str
    expires_at: datetime


class InMemoryCache(ICache):
    """
    ICache backed by a dictionary.

    Expiry is evaluated lazily against the injected clock on every access.
    All operations take a single asyncio lock and never await while holding
    it, so each one is atomic with respect to the others.
    """

    def __init__(self, clock: IClock) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock.now():
            del self._entries[key]
            return None
        return entry

    def _expiry(self, ttl_seconds: int) -> datetime:
        return self._clock.now() + timedelta(seconds=ttl_seconds)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._live(key)
            return entry.value if entry else None

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._entries[key] = _Entry(value, self._expiry(ttl_seconds))

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def compare_and_replace(
        self,
        key: str,
        expected: str,
        new: str | None,
        ttl_seconds: int,
    ) -> bool:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry.value != expected:
                return False
            if new is None:
                del self._entries[key]
            else:
                self._entries[key] = _Entry(new, self._expiry(ttl_seconds))
            return True

    async def increment(self, key: str, ttl_seconds_if_new: int) -> int:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                self._entries[key] = _Entry("1", self._expiry(ttl_seconds_if_new))
                return 1
            count = int(entry.value) + 1
            entry.value = str(count)
            return count

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()
