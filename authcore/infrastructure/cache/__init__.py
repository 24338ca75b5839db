"""Shared cache implementations."""

from authcore.infrastructure.cache.memory_cache import InMemoryCache
from authcore.infrastructure.cache.redis_cache import RedisCache

__all__ = ["InMemoryCache", "RedisCache"]
