"""Repository interfaces - contracts for identity and session state access."""

from authcore.domain.repositories.cache import ICache
from authcore.domain.repositories.user_repository import IUserRepository

__all__ = ["ICache", "IUserRepository"]
