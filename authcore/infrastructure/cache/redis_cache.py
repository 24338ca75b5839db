"""Redis implementation of the shared session cache.

Atomic operations run as Lua scripts, which Redis executes without
interleaving other commands. Every command is bounded by a timeout;
connection failures and timeouts surface as InfrastructureError so that
callers fail closed.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from authcore.application.exceptions.exceptions import InfrastructureError
from authcore.domain.repositories.cache import ICache

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisCache(ICache):
    """ICache backed by redis.asyncio."""

    # ARGV[2] == '' means delete
    _COMPARE_AND_REPLACE_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if current ~= ARGV[1] then
  return 0
end
if ARGV[2] == '' then
  redis.call('DEL', KEYS[1])
else
  redis.call('SET', KEYS[1], ARGV[2], 'EX', tonumber(ARGV[3]))
end
return 1
"""

    _INCREMENT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
  redis.call('EXPIRE', KEYS[1], tonumber(ARGV[1]))
end
return count
"""

    def __init__(self, client: aioredis.Redis, *, operation_timeout: float = 2.0):
        """
        Args:
            client: Async Redis client created with ``decode_responses=True``
            operation_timeout: Upper bound in seconds for each cache call
        """
        self.client = client
        self._operation_timeout = operation_timeout
        self._compare_and_replace = client.register_script(
            self._COMPARE_AND_REPLACE_SCRIPT
        )
        self._increment = client.register_script(self._INCREMENT_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str, *, operation_timeout: float = 2.0) -> "RedisCache":
        client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=operation_timeout,
            socket_connect_timeout=operation_timeout,
        )
        return cls(client, operation_timeout=operation_timeout)

    async def _run(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._operation_timeout)
        except TimeoutError as e:
            logger.error(f"Redis {operation} timed out after {self._operation_timeout}s")
            raise InfrastructureError() from e
        except (RedisError, OSError) as e:
            logger.error(f"Redis {operation} failed: {e}")
            raise InfrastructureError() from e

    async def get(self, key: str) -> str | None:
        return await self._run("GET", self.client.get(key))

    async def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._run("SET", self.client.set(key, value, ex=max(int(ttl_seconds), 1)))

    async def delete(self, key: str) -> None:
        await self._run("DEL", self.client.delete(key))

    async def compare_and_replace(
        self,
        key: str,
        expected: str,
        new: str | None,
        ttl_seconds: int,
    ) -> bool:
        if new == "":
            raise ValueError("Replacement value must not be empty; use None to delete")
        swapped = await self._run(
            "compare-and-replace",
            self._compare_and_replace(
                keys=[key],
                args=[expected, new or "", max(int(ttl_seconds), 1)],
            ),
        )
        return int(swapped) == 1

    async def increment(self, key: str, ttl_seconds_if_new: int) -> int:
        count = await self._run(
            "increment",
            self._increment(keys=[key], args=[max(int(ttl_seconds_if_new), 1)]),
        )
        return int(count)

    async def close(self) -> None:
        await self.client.aclose()
