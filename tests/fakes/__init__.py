"""Fake implementations for testing."""

from tests.fakes.cache_fake import FlakyCache, UnavailableCache
from tests.fakes.clock_fake import FakeClock
from tests.fakes.password_hasher_fake import FakePasswordHasher
from tests.fakes.user_repository_fake import FakeUserRepository

__all__ = [
    "FakeClock",
    "FakePasswordHasher",
    "FakeUserRepository",
    "FlakyCache",
    "UnavailableCache",
]
