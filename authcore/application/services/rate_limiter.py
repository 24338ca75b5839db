"""Fixed-window attempt counting for identity-bound operations."""

import logging
from dataclasses import dataclass

from authcore.domain.repositories.cache import ICache

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_PREFIX = "ratelimit:"


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of one consumption attempt."""

    allowed: bool
    count: int
    limit: int
    remaining: int
    window_seconds: int


class RateLimiter:
    """
    Counts attempts per identifier in a window that starts at first use.

    The first attempt creates the counter with a TTL equal to the window;
    later attempts increment it atomically and leave the TTL alone. Once
    the counter is past the limit, further attempts are rejected without
    touching it, so a flood of rejected requests cannot grow it without
    bound. Concurrent callers may overcount by a little; they never
    undercount.
    """

    def __init__(self, cache: ICache):
        self._cache = cache

    @staticmethod
    def _key(identifier: str) -> str:
        return f"{RATE_LIMIT_KEY_PREFIX}{identifier}"

    async def _count(self, identifier: str) -> int:
        value = await self._cache.get(self._key(identifier))
        return int(value) if value is not None else 0

    async def consume(
        self, identifier: str, limit: int, window_seconds: int
    ) -> RateLimitDecision:
        """
        Charge one attempt to ``identifier``.

        Args:
            identifier: What is being limited (normalized email, ``ip:<addr>``)
            limit: Attempts allowed per window
            window_seconds: Window length, counted from the first attempt

        Returns:
            Decision with ``allowed`` False once the limit is used up

        Raises:
            InfrastructureError: If the cache is unavailable
        """
        count = await self._count(identifier)
        if count > limit:
            logger.warning(f"Rate limit exceeded for {identifier} ({count}/{limit})")
            return RateLimitDecision(
                allowed=False,
                count=count,
                limit=limit,
                remaining=0,
                window_seconds=window_seconds,
            )

        count = await self._cache.increment(self._key(identifier), window_seconds)
        allowed = count <= limit
        if not allowed:
            logger.warning(f"Rate limit exceeded for {identifier} ({count}/{limit})")

        return RateLimitDecision(
            allowed=allowed,
            count=count,
            limit=limit,
            remaining=max(limit - count, 0),
            window_seconds=window_seconds,
        )

