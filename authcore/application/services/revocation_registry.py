"""Negative cache of access tokens revoked before their natural expiry."""

import logging
import math

from authcore.domain.repositories.cache import ICache
from authcore.domain.services.clock import IClock
from authcore.domain.services.token_codec import Claims

logger = logging.getLogger(__name__)

REVOKED_KEY_PREFIX = "revoked:"


class RevocationRegistry:
    """
    Records revoked access tokens by ``jti``.

    Entries expire together with the token they describe, so the registry
    never grows beyond the set of still-unexpired revoked tokens and needs
    no cleanup job.
    """

    def __init__(self, cache: ICache, clock: IClock):
        self._cache = cache
        self._clock = clock

    @staticmethod
    def _key(token_id: str) -> str:
        return f"{REVOKED_KEY_PREFIX}{token_id}"

    async def revoke(self, claims: Claims) -> None:
        """
        Mark an access token as revoked for the rest of its lifetime.

        Already-expired tokens are ignored; expiry rejects them anyway.

        Raises:
            InfrastructureError: If the cache is unavailable
        """
        remaining = claims.remaining_seconds(self._clock.now())
        if remaining <= 0:
            logger.debug(
                f"Skipping revocation of expired token {claims.token_id} "
                f"for subject {claims.subject_id}"
            )
            return

        # exp is whole seconds; round up so a fractional tail is still covered
        ttl_seconds = math.ceil(remaining)
        await self._cache.set_with_ttl(self._key(claims.token_id), "1", ttl_seconds)
        logger.info(
            f"Revoked access token {claims.token_id} for subject "
            f"{claims.subject_id} ({ttl_seconds}s remaining)"
        )

    async def is_revoked(self, claims: Claims) -> bool:
        """
        Check whether an access token was revoked.

        Raises:
            InfrastructureError: If the cache is unavailable. An unreachable
                cache never reads as "not revoked".
        """
        return await self._cache.get(self._key(claims.token_id)) is not None
