"""Current refresh token per subject, with atomic rotation.

Only the most recently issued refresh token of a subject is valid. The
store keeps exactly that value under ``refresh:<subject_id>``; presenting
anything else (an older token, a token already rotated away, a token
after logout) is a replay.

State per subject::

    ACTIVE --rotate--> ACTIVE (new value)      ROTATED for the old value
    ACTIVE --revoke--> (absent)                REVOKED
    ACTIVE --ttl-----> (absent)                EXPIRED
"""

import logging
from enum import Enum

from authcore.domain.repositories.cache import ICache

logger = logging.getLogger(__name__)

REFRESH_KEY_PREFIX = "refresh:"


class RotationResult(str, Enum):
    """Outcome of a rotation attempt."""

    ROTATED = "rotated"
    REPLAYED = "replayed"


class RefreshTokenStore:
    """One valid refresh token per subject, replaced atomically on rotation."""

    def __init__(self, cache: ICache, ttl_seconds: int):
        """
        Args:
            cache: Shared cache holding the current token per subject
            ttl_seconds: Lifetime of a stored token, normally the refresh
                token lifetime
        """
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def _key(subject_id: str) -> str:
        return f"{REFRESH_KEY_PREFIX}{subject_id}"

    async def store(self, subject_id: str, token: str) -> None:
        """
        Record ``token`` as the only valid refresh token of the subject.

        Overwrites (and thereby invalidates) any previous value.
        """
        await self._cache.set_with_ttl(self._key(subject_id), token, self._ttl_seconds)
        logger.debug(f"Stored refresh token for subject {subject_id}")

    async def validate_and_rotate(
        self, subject_id: str, presented: str, new: str
    ) -> RotationResult:
        """
        Swap ``presented`` for ``new`` if ``presented`` is the current token.

        Compare and write happen as one atomic step on the cache. Of several
        concurrent calls presenting the same token, exactly one rotates.

        Returns:
            ROTATED if the swap happened, REPLAYED otherwise (stale, already
            rotated, revoked or expired token)

        Raises:
            InfrastructureError: If the cache is unavailable
        """
        swapped = await self._cache.compare_and_replace(
            self._key(subject_id), presented, new, self._ttl_seconds
        )
        if swapped:
            logger.info(f"Rotated refresh token for subject {subject_id}")
            return RotationResult.ROTATED

        logger.warning(f"Refresh token replay detected for subject {subject_id}")
        return RotationResult.REPLAYED

    async def revoke(self, subject_id: str) -> None:
        """Drop the subject's refresh token so none is valid until next login."""
        await self._cache.delete(self._key(subject_id))
        logger.info(f"Revoked refresh token for subject {subject_id}")

